from __future__ import annotations

import argparse
import json
import sys

from .. import __version__
from ..config.loader import load_config
from ..core.context import RunContext
from ..core.env import getenv
from ..core.errors import AuditError, ConfigError
from ..core.exit_codes import ERR_CONFIG, ERR_INTERNAL
from ..core.logging import log_event
from .output import render_error, resolve_output_format
from .registry import COMMANDS, command_spec


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="aclaudit", description="Audit filesystem ACLs against a declared baseline.")
    p.add_argument("--version", action="version", version=f"aclaudit {__version__}")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--log-json", action="store_true", help="write log events as JSON lines on stderr")
    p.add_argument("--run-id", help="run identifier for logs and artifacts")
    p.add_argument("--config", help="YAML configuration file")
    p.add_argument("--strict-owner", action="store_true", default=None, help="reject baseline rows that redeclare a different owner")
    p.add_argument("--case-sensitive", action="store_true", default=None, help="compare identities and owners case-sensitively")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug log events")
    vg.add_argument("--quiet", action="store_true", help="only emit warnings and errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    version_p = sub.add_parser("version", help="print version")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")
    for spec in COMMANDS:
        spec.configure(sub)
    return p


def _config_overrides(ns: argparse.Namespace) -> dict[str, object]:
    return {
        "provider": getattr(ns, "provider", None),
        "snapshot": getattr(ns, "snapshot", None),
        "jobs": getattr(ns, "jobs", None),
        "strict_owner": ns.strict_owner,
        "case_sensitive_identities": ns.case_sensitive,
    }


def main(argv: list[str] | None = None) -> int:
    raw_argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    ns = parser.parse_args(raw_argv)
    cli_json = "--json" in raw_argv
    if ns.format and cli_json and ns.format != "json":
        print(render_error(as_json=False, message="conflicting output flags: use either --format json or --json", code=ERR_CONFIG), file=sys.stderr)
        return ERR_CONFIG
    fmt = resolve_output_format(
        cli_json=cli_json,
        cli_format=ns.format,
        ci_present=bool(getenv("CI")),
    )
    if ns.cmd == "version":
        payload = {"schema_version": 1, "tool": "aclaudit", "status": "ok", "aclaudit_version": __version__}
        print(json.dumps(payload, sort_keys=True) if fmt == "json" else f"aclaudit {__version__}")
        return 0

    ctx: RunContext | None = None
    try:
        config = load_config(ns.config).with_overrides(**_config_overrides(ns))
        ctx = RunContext.from_args(ns.run_id, config, fmt, ns.verbose, ns.quiet, ns.log_json)  # type: ignore[arg-type]
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format, config=str(config.source or "<defaults>"))
        spec = command_spec(ns.cmd)
        if spec is None:
            raise ConfigError(f"unknown command `{ns.cmd}`")
        rc = spec.run(ctx, ns)
        log_event(ctx, "debug", "cli", "finish", cmd=ns.cmd, rc=rc)
        return rc
    except AuditError as exc:
        print(
            render_error(
                as_json=(fmt == "json"),
                message=str(exc),
                code=exc.code,
                kind=exc.kind,
                run_id=(ctx.run_id if ctx is not None else ""),
            ),
            file=sys.stderr,
        )
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(
            render_error(
                as_json=(fmt == "json"),
                message=f"internal error: {exc}",
                code=ERR_INTERNAL,
                kind="internal_error",
                run_id=(ctx.run_id if ctx is not None else ""),
            ),
            file=sys.stderr,
        )
        return ERR_INTERNAL
