from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Mapping

from ..core.errors import LiveDescriptorUnavailable
from ..core.logging import log_event
from ..model import (
    AuditReport,
    Compliance,
    ExpectedDescriptor,
    OwnerConflict,
    OwnerDeviation,
    ResourceFailure,
    ResourceReconciliation,
    RowError,
)
from ..rights.flags import format_rights
from .reconcile import reconcile_resource

if TYPE_CHECKING:
    from ..core.context import RunContext
    from ..providers.base import LiveDescriptorProvider

Outcome = ResourceReconciliation | ResourceFailure


def audit_resource(
    expected: ExpectedDescriptor,
    provider: LiveDescriptorProvider,
    *,
    case_sensitive: bool = False,
) -> Outcome:
    """Fetch the live descriptor of one resource and reconcile it; fetch failures are returned, not raised."""
    try:
        live = provider.fetch(expected.resource)
    except LiveDescriptorUnavailable as exc:
        return ResourceFailure(expected.resource, exc.kind, exc.message)
    return reconcile_resource(expected, live, case_sensitive=case_sensitive)


def _log_outcome(ctx: RunContext, outcome: Outcome) -> None:
    if isinstance(outcome, ResourceFailure):
        log_event(ctx, "warn", "audit", "resource-skipped", folder=outcome.resource, kind=outcome.kind, error=outcome.message)
        return
    if outcome.owner_deviation:
        log_event(
            ctx,
            "warn",
            "audit",
            "owner-mismatch",
            folder=outcome.resource,
            expected=outcome.expected_owner,
            actual=outcome.live_owner,
        )
    for record in outcome.records:
        if record.compliance is Compliance.OK:
            continue
        log_event(
            ctx,
            "warn",
            "audit",
            "deviation",
            compliance=str(record.compliance),
            folder=record.resource,
            identity=record.identity,
            rights=format_rights(record.rights),
            effect=str(record.effect),
        )
    log_event(
        ctx,
        "debug",
        "audit",
        "resource-reconciled",
        folder=outcome.resource,
        ok=outcome.count(Compliance.OK),
        baseline_only=outcome.count(Compliance.BASELINE_ONLY),
        live_only=outcome.count(Compliance.LIVE_ONLY),
    )


def run_audit(
    descriptors: Mapping[str, ExpectedDescriptor],
    provider: LiveDescriptorProvider,
    *,
    ctx: RunContext | None = None,
    jobs: int = 1,
    case_sensitive: bool = False,
    row_errors: list[RowError] | None = None,
    owner_conflicts: list[OwnerConflict] | None = None,
) -> AuditReport:
    """Reconcile every resource of the baseline against its live descriptor.

    Resources are independent; with ``jobs > 1`` they are fetched on a thread
    pool, and results are still aggregated in baseline order.
    """
    expected = list(descriptors.values())

    def _run_one(descriptor: ExpectedDescriptor) -> Outcome:
        return audit_resource(descriptor, provider, case_sensitive=case_sensitive)

    if jobs > 1 and len(expected) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            outcomes = list(ex.map(_run_one, expected))
    else:
        outcomes = [_run_one(descriptor) for descriptor in expected]

    report = AuditReport(
        resources=len(expected),
        row_errors=list(row_errors or []),
        owner_conflicts=list(owner_conflicts or []),
    )
    for outcome in outcomes:
        if ctx is not None:
            _log_outcome(ctx, outcome)
        if isinstance(outcome, ResourceFailure):
            report.failures.append(outcome)
            continue
        if outcome.owner_deviation:
            report.owner_deviations.append(
                OwnerDeviation(outcome.resource, outcome.expected_owner or "", outcome.live_owner)
            )
        report.records.extend(outcome.records)
    if ctx is not None:
        log_event(ctx, "info", "audit", "summary", status=report.status, **report.summary)
    return report
