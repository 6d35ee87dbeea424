from __future__ import annotations

import argparse
from pathlib import Path

from ..cli.output import emit
from ..core.context import RunContext
from ..core.exit_codes import ERR_DEVIATIONS, OK
from ..core.logging import log_event
from ..engine.audit import run_audit
from ..providers import make_provider
from ..reporting.csv_sink import write_report_csv
from ..reporting.payload import build_report_payload
from ..reporting.text import render_text_report
from ..reporting.writer import write_json_report
from ._shared import add_provider_arguments, emit_json, load_baseline


def configure_audit_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = sub.add_parser("audit", help="compare live ACLs against a baseline CSV")
    parser.add_argument("--baseline", required=True, help="baseline CSV (Folder, Owner, IdentityReference, FileSystemRights, AccessControlType)")
    add_provider_arguments(parser)
    parser.add_argument("--jobs", type=int, help="resources reconciled in parallel")
    parser.add_argument("--csv-out", help="write deviation rows to this CSV file")
    parser.add_argument("--json-out", help="write the JSON report to this file")
    parser.add_argument("--emit-artifacts", action="store_true", help="write report.csv and report.json under the output directory")
    parser.add_argument("--show-ok", action="store_true", help="include compliant rules in text output")
    parser.add_argument("--json", action="store_true", help="emit JSON output")


def run_audit_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    config = ctx.config
    baseline = load_baseline(ctx, ns.baseline)
    provider = make_provider(ctx)
    log_event(ctx, "info", "audit", "start", provider=provider.name, resources=len(baseline.descriptors), jobs=config.jobs)
    report = run_audit(
        baseline.descriptors,
        provider,
        ctx=ctx,
        jobs=config.jobs,
        case_sensitive=config.case_sensitive_identities,
        row_errors=baseline.errors,
        owner_conflicts=baseline.owner_conflicts,
    )
    payload = build_report_payload(report, run_id=ctx.run_id)

    csv_targets: list[Path] = [Path(ns.csv_out)] if ns.csv_out else []
    json_targets: list[Path] = [Path(ns.json_out)] if ns.json_out else []
    if ns.emit_artifacts:
        run_dir = config.output_dir / ctx.run_id
        csv_targets.append(run_dir / "report.csv")
        json_targets.append(run_dir / "report.json")
    for target in csv_targets:
        write_report_csv(report, target, delimiter=config.csv_delimiter)
        log_event(ctx, "info", "audit", "csv-written", path=str(target), rows=len(report.records))
    for target in json_targets:
        write_json_report(target, payload)
        log_event(ctx, "info", "audit", "json-written", path=str(target))

    if emit_json(ctx, ns):
        emit(payload, True)
    else:
        print(render_text_report(report, show_ok=ns.show_ok))
    return OK if report.status == "pass" else ERR_DEVIATIONS
