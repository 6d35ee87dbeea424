from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..core.errors import MalformedBaselineRow, RightsUnparseable
from ..model import AccessRule, ControlType
from ..rights.parse import RawRights, classify_rights

FOLDER = "Folder"
OWNER = "Owner"
IDENTITY = "IdentityReference"
RIGHTS = "FileSystemRights"
CONTROL = "AccessControlType"
REQUIRED_FIELDS = (FOLDER, IDENTITY, RIGHTS, CONTROL)
COLUMNS = (FOLDER, OWNER, IDENTITY, RIGHTS, CONTROL)


@dataclass(frozen=True)
class BaselineRow:
    row_number: int
    resource: str
    owner: str | None
    identity: str
    raw_rights: RawRights
    effect: ControlType

    def to_rule(self) -> AccessRule:
        try:
            rights = self.raw_rights.resolve()
        except RightsUnparseable as exc:
            raise RightsUnparseable(f"row {self.row_number}: {exc.message}", row_number=self.row_number, resource=self.resource) from exc
        return AccessRule(identity=self.identity, rights=rights, effect=self.effect)


def _normalized(row: Mapping[object, object]) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in row.items():
        if key is None:
            continue
        if isinstance(value, list):
            value = ",".join(str(item) for item in value)
        out[str(key).strip().lower()] = "" if value is None else str(value).strip()
    return out


def parse_row(row: Mapping[object, object], row_number: int) -> BaselineRow:
    fields = _normalized(row)
    resource = fields.get(FOLDER.lower(), "") or None
    missing = [name for name in REQUIRED_FIELDS if not fields.get(name.lower())]
    if missing:
        raise MalformedBaselineRow(
            f"row {row_number}: missing required field(s): {', '.join(missing)}",
            row_number=row_number,
            resource=resource,
        )
    resource = fields[FOLDER.lower()]
    try:
        raw_rights = classify_rights(fields[RIGHTS.lower()])
    except RightsUnparseable as exc:
        raise RightsUnparseable(f"row {row_number}: {exc.message}", row_number=row_number, resource=resource) from exc
    try:
        effect = ControlType.parse(fields[CONTROL.lower()])
    except ValueError as exc:
        raise MalformedBaselineRow(f"row {row_number}: {exc}", row_number=row_number, resource=resource) from exc
    return BaselineRow(
        row_number=row_number,
        resource=resource,
        owner=fields.get(OWNER.lower()) or None,
        identity=fields[IDENTITY.lower()],
        raw_rights=raw_rights,
        effect=effect,
    )
