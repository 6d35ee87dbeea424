from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.errors import RightsUnparseable
from .flags import MASK_32, FileSystemRights, coerce_mask, lookup_right
from .mapper import normalize_rights

_NUMERIC_RE = re.compile(r"^(?:[+-]?\d+|0[xX][0-9a-fA-F]+)$")
_HEX_TOKEN_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")


@dataclass(frozen=True)
class NumericRights:
    value: int

    def resolve(self) -> FileSystemRights:
        return normalize_rights(self.value)


@dataclass(frozen=True)
class SymbolicRights:
    text: str

    def resolve(self) -> FileSystemRights:
        return normalize_rights(parse_rights(self.text))


RawRights = NumericRights | SymbolicRights


def _mask_from_number(raw: str) -> int:
    value = int(raw, 16) if raw.lower().startswith("0x") else int(raw)
    if value < -(1 << 31) or value > MASK_32:
        raise RightsUnparseable(f"rights value `{raw}` does not fit in 32 bits")
    return coerce_mask(value)


def classify_rights(text: str) -> RawRights:
    raw = str(text).strip()
    if not raw:
        raise RightsUnparseable("empty rights value")
    if _NUMERIC_RE.fullmatch(raw):
        return NumericRights(_mask_from_number(raw))
    return SymbolicRights(raw)


def parse_rights(text: str) -> FileSystemRights:
    """Parse comma-separated right names; ``0x`` tokens are raw bits as written by ``format_rights``."""
    value = 0
    parts = [part.strip() for part in str(text).split(",")]
    for part in parts:
        if not part:
            raise RightsUnparseable(f"empty right name in `{text}`")
        if _HEX_TOKEN_RE.fullmatch(part):
            value |= _mask_from_number(part)
            continue
        bits = lookup_right(part)
        if bits is None:
            raise RightsUnparseable(f"unknown right `{part}` in `{text}`")
        value |= bits
    return FileSystemRights(value)


def resolve_rights(value: object) -> FileSystemRights:
    """Decode a rights value taken from a row or a live descriptor."""
    if isinstance(value, bool):
        raise RightsUnparseable(f"invalid rights value `{value}`")
    if isinstance(value, int):
        return normalize_rights(value)
    return classify_rights(str(value)).resolve()
