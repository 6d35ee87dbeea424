from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..model import AccessRule, ControlType, LiveDescriptor
from ..rights.flags import FileSystemRights, coerce_mask
from ..rights.parse import NumericRights, classify_rights, parse_rights


@runtime_checkable
class LiveDescriptorProvider(Protocol):
    name: str

    def fetch(self, resource: str) -> LiveDescriptor:
        """Return the live descriptor or raise ``LiveDescriptorUnavailable``."""
        ...


def live_rights(value: object) -> FileSystemRights:
    """Rights as reported by the live system; generic bits are kept undecoded."""
    if isinstance(value, bool):
        raise ValueError(f"invalid rights value `{value}`")
    if isinstance(value, int):
        return FileSystemRights(coerce_mask(value))
    raw = classify_rights(str(value))
    if isinstance(raw, NumericRights):
        return FileSystemRights(raw.value)
    return parse_rights(raw.text)


def _identity(value: Any) -> str:
    if isinstance(value, Mapping):
        value = value.get("Value", "")
    return str(value or "").strip()


def rule_from_entry(entry: Mapping[str, Any]) -> AccessRule:
    identity = _identity(entry.get("IdentityReference"))
    if not identity:
        raise ValueError("access entry without IdentityReference")
    return AccessRule(
        identity=identity,
        rights=live_rights(entry.get("FileSystemRights", "")),
        effect=ControlType.parse(entry.get("AccessControlType", "")),
    )
