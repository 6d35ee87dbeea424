from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..config.loader import AuditConfig
from .clock import utc_now
from .env import getenv

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    output_format: OutputFormat = "text"
    verbose: bool = False
    quiet: bool = False
    log_json: bool = False
    config: AuditConfig = field(default_factory=AuditConfig)

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        config: AuditConfig | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        default_run = f"aclaudit-{utc_now().strftime('%Y%m%d-%H%M%S')}"
        resolved_run_id = run_id or getenv("RUN_ID", default_run) or default_run
        return cls(
            run_id=resolved_run_id,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            config=config or AuditConfig(),
        )
