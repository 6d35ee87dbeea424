from __future__ import annotations

import argparse
from pathlib import Path

from ..baseline.capture import capture_baseline
from ..baseline.csv_io import write_baseline_csv
from ..cli.output import base_payload, emit
from ..core.context import RunContext
from ..core.errors import ConfigError
from ..core.exit_codes import ERR_DEVIATIONS, OK
from ..core.logging import log_event
from ..providers import SnapshotProvider, make_provider
from ._shared import add_provider_arguments, emit_json, load_baseline


def configure_baseline_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = sub.add_parser("baseline", help="validate or capture baseline CSV files")
    baseline_sub = parser.add_subparsers(dest="baseline_cmd")
    baseline_sub.required = True

    validate_parser = baseline_sub.add_parser("validate", help="parse a baseline and report skipped rows")
    validate_parser.add_argument("--baseline", required=True, help="baseline CSV to validate")
    validate_parser.add_argument("--json", action="store_true", help="emit JSON output")

    capture_parser = baseline_sub.add_parser("capture", help="write a baseline CSV from live ACLs")
    capture_parser.add_argument("resources", nargs="*", help="paths to capture (all snapshot entries when omitted)")
    capture_parser.add_argument("--out", required=True, help="baseline CSV to write")
    add_provider_arguments(capture_parser)
    capture_parser.add_argument("--json", action="store_true", help="emit JSON output")


def _run_validate(ctx: RunContext, ns: argparse.Namespace) -> int:
    baseline = load_baseline(ctx, ns.baseline)
    clean = not baseline.errors and not baseline.owner_conflicts
    payload = {
        **base_payload(ctx, "baseline-validate", "pass" if clean else "fail"),
        "baseline": ns.baseline,
        "rows": baseline.rows_read,
        "resources": len(baseline.descriptors),
        "rules": baseline.rule_count,
        "row_errors": [
            {"row": item.row_number, "folder": item.resource, "kind": item.kind, "message": item.message}
            for item in baseline.errors
        ],
        "owner_conflicts": [
            {"row": item.row_number, "folder": item.resource, "kept": item.kept, "ignored": item.ignored}
            for item in baseline.owner_conflicts
        ],
    }
    if emit_json(ctx, ns):
        emit(payload, True)
    else:
        for item in baseline.errors:
            print(f"ROW {item.row_number}: {item.kind}: {item.message}")
        for item in baseline.owner_conflicts:
            print(f"OWNER-CONFLICT {item.resource} row {item.row_number}: kept `{item.kept}`, ignored `{item.ignored}`")
        print(
            f"baseline validate: {payload['status']} rows={baseline.rows_read} "
            f"resources={len(baseline.descriptors)} rules={baseline.rule_count} skipped={len(baseline.errors)}"
        )
    return OK if clean else ERR_DEVIATIONS


def _run_capture(ctx: RunContext, ns: argparse.Namespace) -> int:
    provider = make_provider(ctx)
    resources = list(ns.resources)
    if not resources:
        if not isinstance(provider, SnapshotProvider):
            raise ConfigError("baseline capture needs at least one path unless the snapshot provider is used")
        resources = provider.resources()
    result = capture_baseline(resources, provider, ctx)
    out = Path(ns.out)
    written = write_baseline_csv(result.rows, out, delimiter=ctx.config.csv_delimiter)
    log_event(ctx, "info", "capture", "baseline-written", path=str(out), rows=written)
    status = "pass" if not result.failures else "fail"
    payload = {
        **base_payload(ctx, "baseline-capture", status),
        "out": str(out),
        "resources": len(resources),
        "rows": written,
        "failures": [{"folder": item.resource, "kind": item.kind, "message": item.message} for item in result.failures],
    }
    if emit_json(ctx, ns):
        emit(payload, True)
    else:
        for item in result.failures:
            print(f"SKIPPED {item.resource}: {item.kind} ({item.message})")
        print(f"baseline capture: {status} rows={written} resources={len(resources)} out={out}")
    return OK if not result.failures else ERR_DEVIATIONS


def run_baseline_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    if ns.baseline_cmd == "validate":
        return _run_validate(ctx, ns)
    if ns.baseline_cmd == "capture":
        return _run_capture(ctx, ns)
    return 2
