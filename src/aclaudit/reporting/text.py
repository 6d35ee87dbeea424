from __future__ import annotations

from ..model import AuditReport, Compliance


def render_text_report(report: AuditReport, *, show_ok: bool = False) -> str:
    lines: list[str] = []
    for item in report.failures:
        lines.append(f"SKIPPED {item.resource}: {item.kind} ({item.message})")
    for item in report.row_errors:
        lines.append(f"ROW {item.row_number}: {item.kind}: {item.message}")
    for item in report.owner_conflicts:
        lines.append(f"OWNER-CONFLICT {item.resource} row {item.row_number}: kept `{item.kept}`, ignored `{item.ignored}`")
    for item in report.owner_deviations:
        lines.append(f"OWNER {item.resource}: expected `{item.expected}`, found `{item.actual or '<none>'}`")
    for record in report.records:
        if record.compliance is Compliance.OK and not show_ok:
            continue
        row = record.as_row()
        lines.append(
            f"{row['Compliance']:<12} {row['Folder']} {row['IdentityReference']} "
            f"{row['AccessControlType']} {row['FileSystemRights']}"
        )
    summary = report.summary
    lines.append(
        "summary: "
        f"status={report.status} resources={summary['resources']} checked={summary['resources_checked']} "
        f"skipped={summary['resources_skipped']} rows_skipped={summary['rows_skipped']} "
        f"ok={summary['ok']} baseline_only={summary['baseline_only']} live_only={summary['live_only']} "
        f"owner_mismatches={summary['owner_mismatches']}"
    )
    return "\n".join(lines)
