from __future__ import annotations

import json
import socket
from pathlib import Path

import pytest
from hypothesis import settings

from aclaudit.core.context import RunContext

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("aclaudit", deadline=None, max_examples=200)
settings.load_profile("aclaudit")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def no_network_for_unit(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch) -> None:
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("slow"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture(autouse=True)
def clean_aclaudit_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ACLAUDIT_CONFIG", "ACLAUDIT_PROVIDER", "ACLAUDIT_SNAPSHOT", "ACLAUDIT_JOBS", "RUN_ID", "CI"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def ctx() -> RunContext:
    return RunContext(run_id="pytest-run")


@pytest.fixture
def snapshot_payload() -> dict[str, object]:
    return {
        "schema_version": 1,
        "captured_at": "2026-01-05T10:00:00+00:00",
        "resources": {
            "D:\\Shares\\Finance": {
                "owner": "BUILTIN\\Administrators",
                "access": [
                    {"IdentityReference": "BUILTIN\\Administrators", "FileSystemRights": "FullControl", "AccessControlType": "Allow"},
                    {"IdentityReference": "CORP\\Finance", "FileSystemRights": -1610612736, "AccessControlType": 0},
                ],
            },
            "D:\\Shares\\HR": {
                "owner": "CORP\\hr-admin",
                "access": [
                    {"IdentityReference": "CORP\\HR", "FileSystemRights": "Modify, Synchronize", "AccessControlType": "Allow"},
                    {"IdentityReference": "Everyone", "FileSystemRights": "FullControl", "AccessControlType": "Allow"},
                ],
            },
            "D:\\Shares\\Locked": {"error": "access_denied", "message": "Access to the path is denied."},
        },
    }


@pytest.fixture
def snapshot_file(tmp_path: Path, snapshot_payload: dict[str, object]) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_payload, indent=2), encoding="utf-8")
    return path


BASELINE_CSV = (
    '#TYPE Selected.System.Security.AccessControl.FileSystemAccessRule\n'
    '"Folder","Owner","IdentityReference","FileSystemRights","AccessControlType"\n'
    '"D:\\Shares\\Finance","BUILTIN\\Administrators","BUILTIN\\Administrators","FullControl","Allow"\n'
    '"D:\\Shares\\Finance","","CORP\\Finance","ReadAndExecute","Allow"\n'
    '"D:\\Shares\\HR","CORP\\hr-admin","CORP\\HR","Modify, Synchronize","Allow"\n'
    '"D:\\Shares\\HR","","CORP\\Auditors","ReadAndExecute","Allow"\n'
    '"D:\\Shares\\Locked","","CORP\\Legal","Modify","Allow"\n'
)


@pytest.fixture
def baseline_file(tmp_path: Path) -> Path:
    path = tmp_path / "baseline.csv"
    path.write_text("\ufeff" + BASELINE_CSV, encoding="utf-8")
    return path
