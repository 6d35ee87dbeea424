from __future__ import annotations

from aclaudit.engine.reconcile import owner_matches, reconcile_resource, rights_match, rules_match
from aclaudit.model import AccessRule, Compliance, ControlType, ExpectedDescriptor, LiveDescriptor
from aclaudit.rights import GENERIC_EXECUTE, GENERIC_READ, FileSystemRights as F

ALLOW = ControlType.ALLOW
DENY = ControlType.DENY


def _expected(*rules: AccessRule, owner: str | None = "O1") -> ExpectedDescriptor:
    return ExpectedDescriptor("F", owner, tuple(rules))


def _live(*rules: AccessRule, owner: str | None = "O1") -> LiveDescriptor:
    return LiveDescriptor("F", owner, tuple(rules))


def _kinds(result) -> list[tuple[Compliance, str]]:
    return [(record.compliance, record.identity) for record in result.records]


def test_identical_rule_and_owner_is_compliant() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.ReadAndExecute, ALLOW)),
        _live(AccessRule("U1", F.ReadAndExecute, ALLOW)),
    )
    assert result.owner_deviation is False
    assert _kinds(result) == [(Compliance.OK, "U1")]


def test_generic_live_mask_is_compliant_with_decoded_baseline() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.ReadAndExecute, ALLOW)),
        _live(AccessRule("U1", F(GENERIC_READ | GENERIC_EXECUTE), ALLOW)),
    )
    assert _kinds(result) == [(Compliance.OK, "U1")]


def test_missing_live_rule_is_baseline_only() -> None:
    result = reconcile_resource(_expected(AccessRule("U1", F.ReadData, ALLOW)), _live())
    assert _kinds(result) == [(Compliance.BASELINE_ONLY, "U1")]


def test_extra_live_rule_is_live_only() -> None:
    result = reconcile_resource(_expected(), _live(AccessRule("U2", F.FullControl, ALLOW)))
    assert _kinds(result) == [(Compliance.LIVE_ONLY, "U2")]
    assert result.records[0].rights == F.FullControl


def test_owner_mismatch_does_not_affect_rules() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.Read, ALLOW)),
        _live(AccessRule("U1", F.Read, ALLOW), owner="O2"),
    )
    assert result.owner_deviation is True
    assert (result.expected_owner, result.live_owner) == ("O1", "O2")
    assert _kinds(result) == [(Compliance.OK, "U1")]


def test_records_carry_the_observed_owner() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.Read, ALLOW)),
        _live(AccessRule("U2", F.Read, ALLOW), owner="O2"),
    )
    assert {record.owner for record in result.records} == {"O2"}


def test_baseline_without_owner_never_reports_owner_deviation() -> None:
    result = reconcile_resource(_expected(owner=None), _live(owner="Anyone"))
    assert result.owner_deviation is False


def test_differing_rights_produce_both_sides() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.Modify, ALLOW)),
        _live(AccessRule("U1", F.FullControl, ALLOW)),
    )
    assert _kinds(result) == [(Compliance.BASELINE_ONLY, "U1"), (Compliance.LIVE_ONLY, "U1")]
    assert [record.rights for record in result.records] == [F.Modify, F.FullControl]


def test_allow_and_deny_are_different_rules() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.Write, DENY)),
        _live(AccessRule("U1", F.Write, ALLOW)),
    )
    assert [record.effect for record in result.records] == [DENY, ALLOW]
    assert result.count(Compliance.OK) == 0


def test_duplicate_rules_are_matched_one_to_one() -> None:
    rule = AccessRule("U1", F.Read, ALLOW)
    result = reconcile_resource(_expected(rule, rule), _live(rule))
    assert _kinds(result) == [(Compliance.OK, "U1"), (Compliance.BASELINE_ONLY, "U1")]

    result = reconcile_resource(_expected(rule), _live(rule, rule))
    assert _kinds(result) == [(Compliance.OK, "U1"), (Compliance.LIVE_ONLY, "U1")]


def test_identity_comparison_ignores_case_unless_asked() -> None:
    expected = _expected(AccessRule("CORP\\Finance", F.Read, ALLOW), owner="BUILTIN\\Administrators")
    live = _live(AccessRule("corp\\FINANCE", F.Read, ALLOW), owner="builtin\\administrators")

    relaxed = reconcile_resource(expected, live)
    assert relaxed.owner_deviation is False
    assert relaxed.count(Compliance.OK) == 1

    strict = reconcile_resource(expected, live, case_sensitive=True)
    assert strict.owner_deviation is True
    assert _kinds(strict) == [(Compliance.BASELINE_ONLY, "CORP\\Finance"), (Compliance.LIVE_ONLY, "corp\\FINANCE")]


def test_unmatched_live_rules_keep_live_order() -> None:
    result = reconcile_resource(
        _expected(AccessRule("U1", F.Read, ALLOW)),
        _live(AccessRule("U3", F.Read, ALLOW), AccessRule("U1", F.Read, ALLOW), AccessRule("U2", F.Read, ALLOW)),
    )
    assert _kinds(result) == [(Compliance.OK, "U1"), (Compliance.LIVE_ONLY, "U3"), (Compliance.LIVE_ONLY, "U2")]


def test_rule_helpers() -> None:
    expected = AccessRule("U1", F.ReadAndExecute, ALLOW)
    assert rights_match(expected, AccessRule("U1", F(0xA0000000), ALLOW))
    assert not rights_match(expected, AccessRule("U1", F.Read, ALLOW))
    assert rules_match(expected, AccessRule("u1", F.ReadAndExecute, ALLOW))
    assert not rules_match(expected, AccessRule("u1", F.ReadAndExecute, ALLOW), case_sensitive=True)
    assert owner_matches(None, "O2")
    assert owner_matches("O1", "o1")
    assert not owner_matches("O1", None)


def test_specific_bits_beside_generic_bits_must_be_expected() -> None:
    live_rights = F(GENERIC_READ) | F.ChangePermissions
    result = reconcile_resource(_expected(AccessRule("U1", F.Read, ALLOW)), _live(AccessRule("U1", live_rights, ALLOW)))
    assert _kinds(result) == [(Compliance.BASELINE_ONLY, "U1"), (Compliance.LIVE_ONLY, "U1")]

    result = reconcile_resource(
        _expected(AccessRule("U1", F.Read | F.ChangePermissions, ALLOW)), _live(AccessRule("U1", live_rights, ALLOW))
    )
    assert _kinds(result) == [(Compliance.OK, "U1")]
