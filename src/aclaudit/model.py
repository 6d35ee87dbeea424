from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .rights.flags import FileSystemRights, format_rights


class ControlType(str, Enum):
    ALLOW = "Allow"
    DENY = "Deny"

    @classmethod
    def parse(cls, value: object) -> "ControlType":
        raw = str(value).strip().lower()
        if raw in {"allow", "0"}:
            return cls.ALLOW
        if raw in {"deny", "1"}:
            return cls.DENY
        raise ValueError(f"invalid access control type `{value}`: expected Allow or Deny")

    def __str__(self) -> str:
        return self.value


class Compliance(str, Enum):
    OK = "Ok"
    BASELINE_ONLY = "BaselineOnly"
    LIVE_ONLY = "LiveOnly"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AccessRule:
    identity: str
    rights: FileSystemRights
    effect: ControlType

    @property
    def rights_text(self) -> str:
        return format_rights(self.rights)


@dataclass(frozen=True)
class ExpectedDescriptor:
    resource: str
    owner: str | None = None
    rules: tuple[AccessRule, ...] = ()


@dataclass(frozen=True)
class LiveDescriptor:
    resource: str
    owner: str | None = None
    rules: tuple[AccessRule, ...] = ()


@dataclass(frozen=True)
class DeviationRecord:
    resource: str
    owner: str | None
    identity: str
    rights: FileSystemRights
    effect: ControlType
    compliance: Compliance

    def as_row(self) -> dict[str, str]:
        return {
            "Compliance": str(self.compliance),
            "Folder": self.resource,
            "Owner": self.owner or "",
            "IdentityReference": self.identity,
            "FileSystemRights": format_rights(self.rights),
            "AccessControlType": str(self.effect),
        }


@dataclass(frozen=True)
class OwnerDeviation:
    resource: str
    expected: str
    actual: str | None


@dataclass(frozen=True)
class RowError:
    row_number: int
    resource: str | None
    kind: str
    message: str


@dataclass(frozen=True)
class OwnerConflict:
    row_number: int
    resource: str
    kept: str
    ignored: str


@dataclass(frozen=True)
class ResourceFailure:
    resource: str
    kind: str
    message: str


@dataclass(frozen=True)
class ResourceReconciliation:
    resource: str
    owner_deviation: bool
    records: tuple[DeviationRecord, ...]
    expected_owner: str | None = None
    live_owner: str | None = None

    def count(self, compliance: Compliance) -> int:
        return sum(1 for record in self.records if record.compliance is compliance)


@dataclass
class AuditReport:
    records: list[DeviationRecord] = field(default_factory=list)
    owner_deviations: list[OwnerDeviation] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)
    failures: list[ResourceFailure] = field(default_factory=list)
    owner_conflicts: list[OwnerConflict] = field(default_factory=list)
    resources: int = 0

    def count(self, compliance: Compliance) -> int:
        return sum(1 for record in self.records if record.compliance is compliance)

    @property
    def summary(self) -> dict[str, int]:
        return {
            "resources": self.resources,
            "resources_checked": self.resources - len(self.failures),
            "resources_skipped": len(self.failures),
            "rows_skipped": len(self.row_errors),
            "ok": self.count(Compliance.OK),
            "baseline_only": self.count(Compliance.BASELINE_ONLY),
            "live_only": self.count(Compliance.LIVE_ONLY),
            "owner_mismatches": len(self.owner_deviations),
        }

    @property
    def status(self) -> str:
        summary = self.summary
        clean = all(
            summary[key] == 0
            for key in ("resources_skipped", "rows_skipped", "baseline_only", "live_only", "owner_mismatches")
        )
        return "pass" if clean else "fail"


def identity_key(name: str | None, case_sensitive: bool = False) -> str:
    """Comparison key for account names; Windows principals compare case-insensitively."""
    text = (name or "").strip()
    return text if case_sensitive else text.casefold()
