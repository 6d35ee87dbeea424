"""Live descriptors served from a captured JSON or YAML snapshot file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ..contracts.ids import SNAPSHOT
from ..contracts.schema.validate import validate
from ..core.errors import ACCESS_DENIED, NOT_FOUND, UNAVAILABLE, ConfigError, ContractViolation, LiveDescriptorUnavailable, RightsUnparseable
from ..model import LiveDescriptor
from .base import rule_from_entry

_ERROR_KINDS = {NOT_FOUND, ACCESS_DENIED, UNAVAILABLE}


def load_snapshot(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ConfigError(f"cannot read snapshot {path}: {exc.strerror or exc}") from exc
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot parse snapshot {path}: {exc}") from exc
    try:
        validate(SNAPSHOT, payload)
    except ContractViolation as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    return payload


class SnapshotProvider:
    name = "snapshot"

    def __init__(self, resources: dict[str, Any], source: str = "<memory>") -> None:
        self._resources = resources
        self.source = source

    @classmethod
    def from_file(cls, path: Path) -> "SnapshotProvider":
        payload = load_snapshot(path)
        return cls(dict(payload.get("resources", {})), source=str(path))

    def resources(self) -> list[str]:
        return list(self._resources)

    def fetch(self, resource: str) -> LiveDescriptor:
        entry = self._resources.get(resource)
        if entry is None:
            raise LiveDescriptorUnavailable(resource, f"{resource}: not present in snapshot {self.source}", NOT_FOUND)
        error = entry.get("error")
        if error:
            kind = error if error in _ERROR_KINDS else UNAVAILABLE
            message = entry.get("message") or f"{resource}: {kind.replace('_', ' ')}"
            raise LiveDescriptorUnavailable(resource, message, kind)
        try:
            rules = tuple(rule_from_entry(item) for item in entry.get("access", []) or [])
        except (RightsUnparseable, ValueError) as exc:
            raise LiveDescriptorUnavailable(resource, f"{resource}: unreadable snapshot entry: {exc}", UNAVAILABLE) from exc
        return LiveDescriptor(resource=resource, owner=entry.get("owner") or None, rules=rules)
