from __future__ import annotations

import csv
from pathlib import Path

from ..model import AuditReport

REPORT_COLUMNS = ("Compliance", "Folder", "Owner", "IdentityReference", "FileSystemRights", "AccessControlType")


def write_report_csv(report: AuditReport, path: Path, delimiter: str = ",") -> Path:
    """Write one row per deviation record, in report order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(REPORT_COLUMNS), delimiter=delimiter, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        for record in report.records:
            writer.writerow(record.as_row())
    return path
