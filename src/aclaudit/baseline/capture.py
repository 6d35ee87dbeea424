from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ..core.errors import LiveDescriptorUnavailable
from ..core.logging import log_event
from ..model import LiveDescriptor, ResourceFailure
from ..rights.flags import format_rights
from .parse import CONTROL, FOLDER, IDENTITY, OWNER, RIGHTS

if TYPE_CHECKING:
    from ..core.context import RunContext
    from ..providers.base import LiveDescriptorProvider


@dataclass
class CaptureResult:
    rows: list[dict[str, str]] = field(default_factory=list)
    failures: list[ResourceFailure] = field(default_factory=list)


def descriptor_rows(descriptor: LiveDescriptor) -> list[dict[str, str]]:
    return [
        {
            FOLDER: descriptor.resource,
            OWNER: descriptor.owner or "",
            IDENTITY: rule.identity,
            RIGHTS: format_rights(rule.rights),
            CONTROL: str(rule.effect),
        }
        for rule in descriptor.rules
    ]


def capture_baseline(
    resources: Iterable[str],
    provider: LiveDescriptorProvider,
    ctx: RunContext | None = None,
) -> CaptureResult:
    """Snapshot the live rules of ``resources`` as baseline rows."""
    result = CaptureResult()
    for resource in resources:
        try:
            descriptor = provider.fetch(resource)
        except LiveDescriptorUnavailable as exc:
            result.failures.append(ResourceFailure(resource, exc.kind, exc.message))
            if ctx is not None:
                log_event(ctx, "warn", "capture", "resource-skipped", folder=resource, kind=exc.kind, error=exc.message)
            continue
        rows = descriptor_rows(descriptor)
        result.rows.extend(rows)
        if ctx is not None:
            log_event(ctx, "debug", "capture", "resource-captured", folder=resource, rules=len(rows))
    return result
