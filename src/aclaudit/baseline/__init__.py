"""Baseline ingestion: row parsing, grouping and CSV persistence."""
from .build import BaselineBuild, OwnerConflict, build_baseline
from .capture import CaptureResult, capture_baseline
from .csv_io import read_baseline_csv, write_baseline_csv
from .parse import BaselineRow, parse_row

__all__ = [
    "BaselineBuild",
    "BaselineRow",
    "CaptureResult",
    "OwnerConflict",
    "build_baseline",
    "capture_baseline",
    "parse_row",
    "read_baseline_csv",
    "write_baseline_csv",
]
