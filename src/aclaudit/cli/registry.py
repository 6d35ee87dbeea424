from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Callable

from ..commands.audit import configure_audit_parser, run_audit_command
from ..commands.baseline import configure_baseline_parser, run_baseline_command
from ..commands.rights import configure_rights_parser, run_rights_command
from ..core.context import RunContext


@dataclass(frozen=True)
class CommandSpec:
    name: str
    configure: Callable[[argparse._SubParsersAction[argparse.ArgumentParser]], None]
    run: Callable[[RunContext, argparse.Namespace], int]


COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("audit", configure_audit_parser, run_audit_command),
    CommandSpec("baseline", configure_baseline_parser, run_baseline_command),
    CommandSpec("rights", configure_rights_parser, run_rights_command),
)


def command_spec(name: str) -> CommandSpec | None:
    for spec in COMMANDS:
        if spec.name == name:
            return spec
    return None
