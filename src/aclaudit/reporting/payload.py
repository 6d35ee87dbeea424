from __future__ import annotations

from typing import Any

from ..contracts.ids import REPORT
from ..contracts.schema.validate import validate
from ..core.clock import utc_now_iso
from ..model import AuditReport


def report_rows(report: AuditReport) -> list[dict[str, str]]:
    return [record.as_row() for record in report.records]


def build_report_payload(report: AuditReport, *, run_id: str = "", generated_at: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_name": REPORT,
        "schema_version": 1,
        "tool": "aclaudit",
        "kind": "compliance-report",
        "run_id": run_id,
        "generated_at": generated_at or utc_now_iso(),
        "status": report.status,
        "summary": dict(report.summary),
        "rows": report_rows(report),
        "owner_deviations": [
            {"Folder": item.resource, "Expected": item.expected, "Actual": item.actual}
            for item in report.owner_deviations
        ],
        "owner_conflicts": [
            {"row": item.row_number, "folder": item.resource, "kept": item.kept, "ignored": item.ignored}
            for item in report.owner_conflicts
        ],
        "row_errors": [
            {"row": item.row_number, "folder": item.resource, "kind": item.kind, "message": item.message}
            for item in report.row_errors
        ],
        "failures": [
            {"folder": item.resource, "kind": item.kind, "message": item.message}
            for item in report.failures
        ],
    }
    validate(REPORT, payload)
    return payload
