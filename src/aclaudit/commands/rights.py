from __future__ import annotations

import argparse

from ..cli.output import base_payload, emit
from ..core.context import RunContext
from ..core.errors import InputError, RightsUnparseable
from ..core.exit_codes import OK
from ..rights.flags import GENERIC_MASK, coerce_mask, format_rights
from ..rights.mapper import map_generic_to_filesystem_rights
from ..rights.parse import NumericRights, classify_rights
from ._shared import emit_json


def configure_rights_parser(sub: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = sub.add_parser("rights", help="inspect access-right values")
    rights_sub = parser.add_subparsers(dest="rights_cmd")
    rights_sub.required = True
    decode_parser = rights_sub.add_parser("decode", help="expand a generic-rights mask into filesystem rights")
    decode_parser.add_argument("mask", help="decimal (signed or unsigned) or 0x-prefixed mask")
    decode_parser.add_argument("--json", action="store_true", help="emit JSON output")


def run_rights_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    try:
        raw = classify_rights(ns.mask)
    except RightsUnparseable as exc:
        raise InputError(f"invalid mask `{ns.mask}`: {exc.message}") from exc
    if not isinstance(raw, NumericRights):
        raise InputError(f"invalid mask `{ns.mask}`: expected a number")
    mask = coerce_mask(raw.value)
    decoded = map_generic_to_filesystem_rights(mask)
    payload = {
        **base_payload(ctx, "rights-decode"),
        "mask": f"0x{mask:08X}",
        "generic": format_rights(mask & GENERIC_MASK),
        "value": int(decoded),
        "rights": format_rights(decoded),
    }
    if emit_json(ctx, ns):
        emit(payload, True)
    else:
        print(f"{payload['mask']} ({payload['generic']}) -> {payload['rights']}")
    return OK
