"""Live security-descriptor providers."""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.errors import ConfigError
from .base import LiveDescriptorProvider
from .powershell import PowerShellProvider
from .snapshot import SnapshotProvider

if TYPE_CHECKING:
    from ..core.context import RunContext


def make_provider(ctx: RunContext) -> LiveDescriptorProvider:
    config = ctx.config
    if config.provider == "snapshot":
        if config.snapshot is None:
            raise ConfigError("snapshot provider requires --snapshot, ACLAUDIT_SNAPSHOT or `snapshot:` in the config file")
        return SnapshotProvider.from_file(config.snapshot)
    if config.provider == "powershell":
        return PowerShellProvider(
            executable=config.powershell.executable,
            timeout_seconds=config.powershell.timeout_seconds,
            ctx=ctx,
        )
    raise ConfigError(f"unknown provider `{config.provider}`")


__all__ = ["LiveDescriptorProvider", "PowerShellProvider", "SnapshotProvider", "make_provider"]
