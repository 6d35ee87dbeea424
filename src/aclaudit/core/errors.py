from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_CONFIG, ERR_INPUT, ERR_INTERNAL, ERR_VALIDATION


@dataclass
class AuditError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


class ConfigError(AuditError):
    def __init__(self, message: str) -> None:
        super().__init__(message, ERR_CONFIG, "config_error")


class ContractViolation(AuditError):
    def __init__(self, message: str) -> None:
        super().__init__(message, ERR_VALIDATION, "schema_validation")


class InputError(AuditError):
    def __init__(self, message: str) -> None:
        super().__init__(message, ERR_INPUT, "input_error")


class MalformedBaselineRow(AuditError):
    """A baseline row that cannot become an access rule; the row is skipped."""

    def __init__(self, message: str, *, row_number: int = 0, resource: str | None = None, kind: str = "malformed_row") -> None:
        super().__init__(message, ERR_INPUT, kind)
        self.row_number = row_number
        self.resource = resource


class RightsUnparseable(MalformedBaselineRow):
    def __init__(self, message: str, *, row_number: int = 0, resource: str | None = None) -> None:
        super().__init__(message, row_number=row_number, resource=resource, kind="rights_unparseable")


NOT_FOUND = "not_found"
ACCESS_DENIED = "access_denied"
UNAVAILABLE = "unavailable"


class LiveDescriptorUnavailable(AuditError):
    """The live security descriptor of one resource could not be read."""

    def __init__(self, resource: str, message: str, kind: str = UNAVAILABLE) -> None:
        super().__init__(message, ERR_INPUT, kind)
        self.resource = resource
