from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Mapping

from ..core.errors import InputError
from .parse import COLUMNS

_TYPE_PREAMBLE = "#TYPE"


def read_baseline_csv(path: Path, delimiter: str = ",") -> list[dict[str, str]]:
    """Read baseline rows from a CSV file.

    A UTF-8 BOM and the ``#TYPE`` line written by PowerShell ``Export-Csv`` are
    skipped.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise InputError(f"baseline file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"cannot read baseline file {path}: {exc}") from exc
    return parse_baseline_csv(text, delimiter=delimiter)


def parse_baseline_csv(text: str, delimiter: str = ",") -> list[dict[str, str]]:
    lines = text.splitlines(keepends=True)
    if lines and lines[0].lstrip().startswith(_TYPE_PREAMBLE):
        lines = lines[1:]
    reader = csv.DictReader(io.StringIO("".join(lines)), delimiter=delimiter)
    if reader.fieldnames is None:
        return []
    return [dict(row) for row in reader]


def write_baseline_csv(rows: Iterable[Mapping[str, str]], path: Path, delimiter: str = ",") -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(COLUMNS), delimiter=delimiter, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        for row in rows:
            writer.writerow({column: row.get(column, "") for column in COLUMNS})
            count += 1
    return count
