from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .logging import log_event

if TYPE_CHECKING:
    from .context import RunContext

TIMEOUT_CODE = 124


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def combined_output(self) -> str:
        return (self.stdout + self.stderr).strip()

    @property
    def timed_out(self) -> bool:
        return self.code == TIMEOUT_CODE


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout_seconds: int = 0,
    ctx: RunContext | None = None,
) -> CommandResult:
    started = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            text=True,
            capture_output=True,
            check=False,
            timeout=(timeout_seconds if timeout_seconds > 0 else None),
        )
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout.decode() if isinstance(exc.stdout, bytes) else (exc.stdout or "")
        stderr = exc.stderr.decode() if isinstance(exc.stderr, bytes) else (exc.stderr or "")
        result = CommandResult(
            code=TIMEOUT_CODE,
            stdout=stdout,
            stderr=(stderr + f"\ncommand timed out after {timeout_seconds}s").strip(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except FileNotFoundError as exc:
        result = CommandResult(code=127, stdout="", stderr=f"executable not found: {exc.filename or cmd[0]}", duration_ms=0)
    if ctx is not None:
        log_event(
            ctx,
            "debug",
            "process",
            "run-command",
            command=cmd[0],
            code=result.code,
            duration_ms=result.duration_ms,
        )
    return result
