"""Three-way reconciliation of expected against live access rules."""

from __future__ import annotations

from ..model import (
    AccessRule,
    Compliance,
    DeviationRecord,
    ExpectedDescriptor,
    LiveDescriptor,
    ResourceReconciliation,
    identity_key,
)
from ..rights.mapper import normalize_rights


def rights_match(expected: AccessRule, live: AccessRule) -> bool:
    """Exact rights, or live rights that expand from generic bits to the expected set.

    Specific bits set next to generic ones on the live rule are kept through the
    expansion, so they must be part of the expected set too.
    """
    if live.rights == expected.rights:
        return True
    return normalize_rights(live.rights) == expected.rights


def rules_match(expected: AccessRule, live: AccessRule, case_sensitive: bool = False) -> bool:
    if expected.effect is not live.effect:
        return False
    if identity_key(expected.identity, case_sensitive) != identity_key(live.identity, case_sensitive):
        return False
    return rights_match(expected, live)


def owner_matches(expected: str | None, actual: str | None, case_sensitive: bool = False) -> bool:
    if not expected:
        return True
    return identity_key(expected, case_sensitive) == identity_key(actual, case_sensitive)


def _record(resource: str, owner: str | None, rule: AccessRule, compliance: Compliance) -> DeviationRecord:
    return DeviationRecord(
        resource=resource,
        owner=owner,
        identity=rule.identity,
        rights=rule.rights,
        effect=rule.effect,
        compliance=compliance,
    )


def reconcile_resource(
    expected: ExpectedDescriptor,
    live: LiveDescriptor,
    *,
    case_sensitive: bool = False,
) -> ResourceReconciliation:
    """Classify every expected and every live rule of one resource exactly once.

    Records follow the expected rules in baseline order, then the unmatched
    live rules in live order. A live rule satisfies at most one expected rule;
    when several could, the first in live order is consumed.
    """
    resource = expected.resource
    observed_owner = live.owner
    consumed = [False] * len(live.rules)
    records: list[DeviationRecord] = []

    for rule in expected.rules:
        match_index = None
        for index, candidate in enumerate(live.rules):
            if not consumed[index] and rules_match(rule, candidate, case_sensitive):
                match_index = index
                break
        if match_index is None:
            records.append(_record(resource, observed_owner, rule, Compliance.BASELINE_ONLY))
            continue
        consumed[match_index] = True
        records.append(_record(resource, observed_owner, rule, Compliance.OK))

    for index, candidate in enumerate(live.rules):
        if not consumed[index]:
            records.append(_record(resource, observed_owner, candidate, Compliance.LIVE_ONLY))

    return ResourceReconciliation(
        resource=resource,
        owner_deviation=not owner_matches(expected.owner, observed_owner, case_sensitive),
        records=tuple(records),
        expected_owner=expected.owner,
        live_owner=observed_owner,
    )
