"""CLI payload output helpers."""

from __future__ import annotations

from ..contracts.ids import ERROR
from ..core.serialize import dumps_json


def emit(payload: dict[str, object], as_json: bool) -> None:
    print(dumps_json(payload, pretty=not as_json))


def base_payload(ctx, kind: str, status: str = "ok") -> dict[str, object]:  # noqa: ANN001
    return {
        "schema_version": 1,
        "tool": "aclaudit",
        "kind": kind,
        "status": status,
        "run_id": ctx.run_id,
    }


def resolve_output_format(*, cli_json: bool, cli_format: str | None, ci_present: bool) -> str:
    if cli_json:
        return "json"
    if cli_format:
        return cli_format
    return "json" if ci_present else "text"


def render_error(*, as_json: bool, message: str, code: int, kind: str = "generic_error", run_id: str = "") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": ERROR,
                "schema_version": 1,
                "tool": "aclaudit",
                "status": "error",
                "run_id": run_id,
                "errors": [{"code": code, "kind": kind, "message": message}],
            },
            pretty=False,
        )
    return f"aclaudit: error: {message}"
