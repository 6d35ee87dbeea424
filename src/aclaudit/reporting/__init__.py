"""Report sinks: CSV rows, JSON payload and text summary."""
from .csv_sink import REPORT_COLUMNS, write_report_csv
from .payload import build_report_payload, report_rows
from .text import render_text_report
from .writer import write_json_report

__all__ = [
    "REPORT_COLUMNS",
    "build_report_payload",
    "render_text_report",
    "report_rows",
    "write_json_report",
    "write_report_csv",
]
