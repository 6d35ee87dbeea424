from __future__ import annotations

import argparse
from pathlib import Path

from ..baseline.build import BaselineBuild, build_baseline
from ..baseline.csv_io import read_baseline_csv
from ..core.context import RunContext


def emit_json(ctx: RunContext, ns: argparse.Namespace) -> bool:
    return bool(getattr(ns, "json", False) or ctx.output_format == "json")


def load_baseline(ctx: RunContext, path: str) -> BaselineBuild:
    rows = read_baseline_csv(Path(path), delimiter=ctx.config.csv_delimiter)
    return build_baseline(
        rows,
        ctx=ctx,
        strict_owner=ctx.config.strict_owner,
        case_sensitive_identities=ctx.config.case_sensitive_identities,
    )


def add_provider_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--provider", choices=["snapshot", "powershell"], help="live descriptor source")
    parser.add_argument("--snapshot", help="snapshot file (JSON or YAML) for the snapshot provider")
