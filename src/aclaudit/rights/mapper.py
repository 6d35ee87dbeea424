from __future__ import annotations

from .flags import (
    GENERIC_ALL,
    GENERIC_EXECUTE,
    GENERIC_MASK,
    GENERIC_READ,
    GENERIC_WRITE,
    NO_RIGHTS,
    FileSystemRights,
    coerce_mask,
)

F = FileSystemRights

GENERIC_RIGHTS_TABLE: tuple[tuple[int, FileSystemRights], ...] = (
    (GENERIC_READ, F.ReadAttributes | F.ReadData | F.ReadExtendedAttributes | F.ReadPermissions | F.Synchronize),
    (
        GENERIC_WRITE,
        F.AppendData | F.WriteAttributes | F.WriteData | F.WriteExtendedAttributes | F.ReadPermissions | F.Synchronize,
    ),
    (GENERIC_EXECUTE, F.ExecuteFile | F.ReadPermissions | F.ReadAttributes | F.Synchronize),
    (GENERIC_ALL, F.FullControl),
)


def map_generic_to_filesystem_rights(mask: int) -> FileSystemRights:
    """Translate the generic bits (28-31) of ``mask`` into filesystem rights.

    Every other bit is ignored; a mask without generic bits maps to no rights.
    """
    value = coerce_mask(mask)
    rights = NO_RIGHTS
    for bit, granted in GENERIC_RIGHTS_TABLE:
        if value & bit:
            rights |= granted
    return rights


def normalize_rights(mask: int) -> FileSystemRights:
    """Expand generic bits in place, keeping any specific bits already set."""
    value = coerce_mask(mask)
    return FileSystemRights(value & ~GENERIC_MASK) | map_generic_to_filesystem_rights(value)
