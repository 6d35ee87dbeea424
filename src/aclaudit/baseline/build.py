"""Group flat baseline rows into one expected descriptor per resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping

from ..core.errors import MalformedBaselineRow
from ..core.logging import log_event
from ..model import AccessRule, ExpectedDescriptor, OwnerConflict, RowError, identity_key
from .parse import parse_row

if TYPE_CHECKING:
    from ..core.context import RunContext

OWNER_CONFLICT = "owner_conflict"


@dataclass
class _Draft:
    resource: str
    owner: str | None = None
    rules: list[AccessRule] = field(default_factory=list)

    def freeze(self) -> ExpectedDescriptor:
        return ExpectedDescriptor(resource=self.resource, owner=self.owner, rules=tuple(self.rules))


@dataclass
class BaselineBuild:
    descriptors: dict[str, ExpectedDescriptor] = field(default_factory=dict)
    errors: list[RowError] = field(default_factory=list)
    owner_conflicts: list[OwnerConflict] = field(default_factory=list)
    rows_read: int = 0

    @property
    def rule_count(self) -> int:
        return sum(len(descriptor.rules) for descriptor in self.descriptors.values())


def build_baseline(
    rows: Iterable[Mapping[object, object]],
    *,
    ctx: RunContext | None = None,
    strict_owner: bool = False,
    case_sensitive_identities: bool = False,
    first_row_number: int = 2,
) -> BaselineBuild:
    """Build expected descriptors from baseline rows.

    Row numbers default to spreadsheet numbering (header on row 1). Malformed
    rows are skipped and recorded; they never abort the batch. The first
    non-empty ``Owner`` of a resource wins. A later, different owner is recorded
    as a conflict, and with ``strict_owner`` the conflicting row is rejected.
    """
    drafts: dict[str, _Draft] = {}
    result = BaselineBuild()
    for offset, raw in enumerate(rows):
        row_number = first_row_number + offset
        result.rows_read += 1
        try:
            row = parse_row(raw, row_number)
            rule = row.to_rule()
        except MalformedBaselineRow as exc:
            result.errors.append(RowError(row_number, exc.resource, exc.kind, exc.message))
            if ctx is not None:
                log_event(ctx, "warn", "baseline", "row-skipped", row=row_number, folder=exc.resource, kind=exc.kind, error=exc.message)
            continue

        draft = drafts.get(row.resource)
        if row.owner and draft is not None and draft.owner:
            if identity_key(row.owner, case_sensitive_identities) != identity_key(draft.owner, case_sensitive_identities):
                conflict = OwnerConflict(row_number, row.resource, draft.owner, row.owner)
                result.owner_conflicts.append(conflict)
                if ctx is not None:
                    log_event(ctx, "warn", "baseline", "owner-conflict", row=row_number, folder=row.resource, kept=draft.owner, ignored=row.owner)
                if strict_owner:
                    message = f"row {row_number}: owner `{row.owner}` conflicts with `{draft.owner}` declared earlier for {row.resource}"
                    result.errors.append(RowError(row_number, row.resource, OWNER_CONFLICT, message))
                    continue

        if draft is None:
            draft = drafts[row.resource] = _Draft(resource=row.resource)
        if not draft.owner and row.owner:
            draft.owner = row.owner
        draft.rules.append(rule)

    result.descriptors = {resource: draft.freeze() for resource, draft in drafts.items()}
    if ctx is not None:
        log_event(
            ctx,
            "info",
            "baseline",
            "built",
            rows=result.rows_read,
            resources=len(result.descriptors),
            rules=result.rule_count,
            skipped=len(result.errors),
        )
    return result
