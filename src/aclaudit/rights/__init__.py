"""Access-right flags and the generic-rights mapping."""
from .flags import (
    GENERIC_ALL,
    GENERIC_EXECUTE,
    GENERIC_READ,
    GENERIC_WRITE,
    NO_RIGHTS,
    FileSystemRights,
    GenericRights,
    format_rights,
)
from .mapper import map_generic_to_filesystem_rights, normalize_rights
from .parse import NumericRights, RawRights, SymbolicRights, classify_rights, parse_rights, resolve_rights

__all__ = [
    "GENERIC_ALL",
    "GENERIC_EXECUTE",
    "GENERIC_READ",
    "GENERIC_WRITE",
    "NO_RIGHTS",
    "FileSystemRights",
    "GenericRights",
    "NumericRights",
    "RawRights",
    "SymbolicRights",
    "classify_rights",
    "format_rights",
    "map_generic_to_filesystem_rights",
    "normalize_rights",
    "parse_rights",
    "resolve_rights",
]
