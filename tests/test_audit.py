from __future__ import annotations

import json
import threading
import time
from pathlib import Path

import pytest

from aclaudit.baseline import build_baseline, read_baseline_csv
from aclaudit.core.context import RunContext
from aclaudit.core.errors import ACCESS_DENIED, NOT_FOUND, LiveDescriptorUnavailable
from aclaudit.engine import audit_resource, run_audit
from aclaudit.model import AccessRule, Compliance, ControlType, ExpectedDescriptor, LiveDescriptor, ResourceFailure
from aclaudit.providers import SnapshotProvider
from aclaudit.rights import FileSystemRights as F


class _SlowProvider:
    name = "slow"

    def __init__(self, delays: dict[str, float]) -> None:
        self.delays = delays
        self.threads: set[int] = set()

    def fetch(self, resource: str) -> LiveDescriptor:
        self.threads.add(threading.get_ident())
        time.sleep(self.delays.get(resource, 0.0))
        if resource == "missing":
            raise LiveDescriptorUnavailable(resource, f"{resource}: gone", NOT_FOUND)
        return LiveDescriptor(resource, "O1", (AccessRule("U1", F.Read, ControlType.ALLOW),))


def _descriptors(*names: str) -> dict[str, ExpectedDescriptor]:
    return {name: ExpectedDescriptor(name, "O1", (AccessRule("U1", F.Read, ControlType.ALLOW),)) for name in names}


def test_audit_of_exported_baseline_against_snapshot(baseline_file: Path, snapshot_file: Path) -> None:
    build = build_baseline(read_baseline_csv(baseline_file))
    report = run_audit(build.descriptors, SnapshotProvider.from_file(snapshot_file))
    assert report.summary == {
        "resources": 3,
        "resources_checked": 2,
        "resources_skipped": 1,
        "rows_skipped": 0,
        "ok": 3,
        "baseline_only": 1,
        "live_only": 1,
        "owner_mismatches": 0,
    }
    assert report.status == "fail"
    assert [(record.compliance, record.identity) for record in report.records] == [
        (Compliance.OK, "BUILTIN\\Administrators"),
        (Compliance.OK, "CORP\\Finance"),
        (Compliance.OK, "CORP\\HR"),
        (Compliance.BASELINE_ONLY, "CORP\\Auditors"),
        (Compliance.LIVE_ONLY, "Everyone"),
    ]
    [failure] = report.failures
    assert (failure.resource, failure.kind) == ("D:\\Shares\\Locked", ACCESS_DENIED)


def test_unreadable_resource_does_not_stop_the_audit() -> None:
    report = run_audit(_descriptors("a", "missing", "b"), _SlowProvider({}))
    assert [failure.resource for failure in report.failures] == ["missing"]
    assert [record.resource for record in report.records] == ["a", "b"]
    assert report.summary["resources_checked"] == 2


def test_parallel_audit_keeps_baseline_order() -> None:
    provider = _SlowProvider({"a": 0.2, "b": 0.1, "c": 0.0})
    report = run_audit(_descriptors("a", "b", "c"), provider, jobs=3)
    assert [record.resource for record in report.records] == ["a", "b", "c"]
    assert len(provider.threads) > 1


def test_clean_audit_passes() -> None:
    report = run_audit(_descriptors("a", "b"), _SlowProvider({}))
    assert report.status == "pass"
    assert report.summary["ok"] == 2


def test_owner_mismatch_fails_the_audit() -> None:
    descriptors = {"a": ExpectedDescriptor("a", "Someone", (AccessRule("U1", F.Read, ControlType.ALLOW),))}
    report = run_audit(descriptors, _SlowProvider({}))
    [deviation] = report.owner_deviations
    assert (deviation.resource, deviation.expected, deviation.actual) == ("a", "Someone", "O1")
    assert report.status == "fail"


def test_carried_row_errors_fail_the_audit() -> None:
    build = build_baseline([{"Folder": "a", "IdentityReference": "U1", "FileSystemRights": "Bogus", "AccessControlType": "Allow"}])
    report = run_audit(_descriptors("a"), _SlowProvider({}), row_errors=build.errors)
    assert report.summary["rows_skipped"] == 1
    assert report.status == "fail"


def test_audit_resource_returns_failure_instead_of_raising() -> None:
    expected = ExpectedDescriptor("missing")
    outcome = audit_resource(expected, _SlowProvider({}))
    assert isinstance(outcome, ResourceFailure)
    assert outcome.kind == NOT_FOUND


def test_deviations_and_skips_are_logged(ctx, baseline_file: Path, snapshot_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    build = build_baseline(read_baseline_csv(baseline_file))
    run_audit(build.descriptors, SnapshotProvider.from_file(snapshot_file), ctx=ctx)
    err = capsys.readouterr().err
    assert "level=warn" in err
    assert "action=resource-skipped" in err
    assert "compliance=LiveOnly" in err
    assert "identity=Everyone" in err
    assert "action=summary" in err
    assert "status=fail" in err


def test_log_json_emits_one_object_per_event(baseline_file: Path, snapshot_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ctx = RunContext(run_id="json-run", quiet=True, log_json=True)
    build = build_baseline(read_baseline_csv(baseline_file), ctx=ctx)
    run_audit(build.descriptors, SnapshotProvider.from_file(snapshot_file), ctx=ctx)
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert {event["level"] for event in events} == {"warn"}
    assert {event["action"] for event in events} == {"resource-skipped", "deviation"}
    assert all(event["run_id"] == "json-run" for event in events)
