"""Live descriptors read with PowerShell ``Get-Acl``."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable

from ..core.errors import ACCESS_DENIED, NOT_FOUND, UNAVAILABLE, LiveDescriptorUnavailable, RightsUnparseable
from ..core.process import CommandResult, run_command
from ..model import LiveDescriptor
from .base import rule_from_entry

if TYPE_CHECKING:
    from ..core.context import RunContext

_SCRIPT = (
    "$ErrorActionPreference = 'Stop'; "
    "Get-Acl -LiteralPath '{path}' | Select-Object Owner, "
    "@{{n='Access';e={{ @($_.Access | ForEach-Object {{ [pscustomobject]@{{ "
    "IdentityReference = $_.IdentityReference.Value; "
    "FileSystemRights = [int]$_.FileSystemRights; "
    "AccessControlType = $_.AccessControlType.ToString() }} }}) }}}} "
    "| ConvertTo-Json -Depth 4 -Compress"
)

_NOT_FOUND_MARKERS = ("cannot find path", "itemnotfound", "pathnotfound", "does not exist")
_DENIED_MARKERS = ("unauthorizedaccess", "access is denied", "access to the path", "permissiondenied")

Runner = Callable[..., CommandResult]


def build_script(path: str) -> str:
    return _SCRIPT.format(path=path.replace("'", "''"))


def classify_failure(stderr: str) -> str:
    lowered = stderr.lower()
    if any(marker in lowered for marker in _NOT_FOUND_MARKERS):
        return NOT_FOUND
    if any(marker in lowered for marker in _DENIED_MARKERS):
        return ACCESS_DENIED
    return UNAVAILABLE


def parse_get_acl_json(resource: str, text: str) -> LiveDescriptor:
    payload: Any = json.loads(text)
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    if not isinstance(payload, dict):
        raise ValueError("Get-Acl output is not an object")
    access = payload.get("Access") or []
    if isinstance(access, dict):
        access = [access]
    rules = tuple(rule_from_entry(item) for item in access)
    return LiveDescriptor(resource=resource, owner=payload.get("Owner") or None, rules=rules)


class PowerShellProvider:
    name = "powershell"

    def __init__(
        self,
        executable: str = "pwsh",
        timeout_seconds: int = 30,
        ctx: RunContext | None = None,
        runner: Runner = run_command,
    ) -> None:
        self.executable = executable
        self.timeout_seconds = timeout_seconds
        self.ctx = ctx
        self._runner = runner

    def command(self, resource: str) -> list[str]:
        return [self.executable, "-NoProfile", "-NonInteractive", "-Command", build_script(resource)]

    def fetch(self, resource: str) -> LiveDescriptor:
        result = self._runner(self.command(resource), timeout_seconds=self.timeout_seconds, ctx=self.ctx)
        if result.timed_out:
            raise LiveDescriptorUnavailable(resource, f"{resource}: Get-Acl timed out after {self.timeout_seconds}s", UNAVAILABLE)
        if result.code != 0:
            detail = result.stderr.strip() or result.stdout.strip() or f"exit code {result.code}"
            raise LiveDescriptorUnavailable(resource, f"{resource}: {detail.splitlines()[0]}", classify_failure(detail))
        try:
            return parse_get_acl_json(resource, result.stdout)
        except (json.JSONDecodeError, RightsUnparseable, ValueError) as exc:
            raise LiveDescriptorUnavailable(resource, f"{resource}: unreadable Get-Acl output: {exc}", UNAVAILABLE) from exc
