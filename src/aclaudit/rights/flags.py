"""Filesystem and generic access-right flags.

Bit values follow the Windows ``FileSystemRights`` enumeration. The composite
names (``Read``, ``ReadAndExecute``, ``Write``, ``Modify``) follow the
``FILE_GENERIC_*`` definitions and therefore include ``Synchronize``.
"""

from __future__ import annotations

from enum import IntFlag

MASK_32 = 0xFFFFFFFF


class GenericRights(IntFlag):
    GenericAll = 0x10000000
    GenericExecute = 0x20000000
    GenericWrite = 0x40000000
    GenericRead = 0x80000000


GENERIC_ALL = int(GenericRights.GenericAll)
GENERIC_EXECUTE = int(GenericRights.GenericExecute)
GENERIC_WRITE = int(GenericRights.GenericWrite)
GENERIC_READ = int(GenericRights.GenericRead)
GENERIC_MASK = GENERIC_READ | GENERIC_WRITE | GENERIC_EXECUTE | GENERIC_ALL


class FileSystemRights(IntFlag):
    ReadData = 0x1
    ListDirectory = 0x1
    WriteData = 0x2
    CreateFiles = 0x2
    AppendData = 0x4
    CreateDirectories = 0x4
    ReadExtendedAttributes = 0x8
    WriteExtendedAttributes = 0x10
    ExecuteFile = 0x20
    Traverse = 0x20
    DeleteSubdirectoriesAndFiles = 0x40
    ReadAttributes = 0x80
    WriteAttributes = 0x100
    Delete = 0x10000
    ReadPermissions = 0x20000
    ChangePermissions = 0x40000
    TakeOwnership = 0x80000
    Synchronize = 0x100000
    FullControl = 0x1F01FF
    Read = ReadData | ReadExtendedAttributes | ReadAttributes | ReadPermissions | Synchronize
    ReadAndExecute = Read | ExecuteFile
    Write = WriteData | AppendData | WriteExtendedAttributes | WriteAttributes | Synchronize
    Modify = ReadAndExecute | Write | Delete


NO_RIGHTS = FileSystemRights(0)


def _canonical_members() -> tuple[tuple[str, int], ...]:
    rows = [(name, int(member)) for name, member in FileSystemRights.__members__.items() if member.name == name]
    rows.extend((member.name or "", int(member)) for member in GenericRights)
    # widest names first so composites win over their parts
    rows.sort(key=lambda row: (-row[1].bit_count(), -row[1], row[0]))
    return tuple(rows)


_CANONICAL = _canonical_members()
_LOOKUP: dict[str, int] = {
    **{name.lower(): int(member) for name, member in FileSystemRights.__members__.items()},
    **{(member.name or "").lower(): int(member) for member in GenericRights},
    "none": 0,
}


def coerce_mask(value: int) -> int:
    """Reduce a possibly signed integer to its unsigned 32-bit form."""
    return int(value) & MASK_32


def lookup_right(name: str) -> int | None:
    return _LOOKUP.get(name.strip().lower())


def format_rights(value: int) -> str:
    """Render a rights value as a comma-separated list of names.

    Composite names are preferred; bits no name covers are rendered as a hex
    remainder.
    """
    mask = coerce_mask(value)
    if mask == 0:
        return "None"
    names: list[str] = []
    covered = 0
    for name, bits in _CANONICAL:
        if mask & bits != bits or covered & bits == bits:
            continue
        names.append(name)
        covered |= bits
    leftover = mask & ~covered
    if leftover:
        names.append(f"0x{leftover:08X}")
    return ", ".join(names)
