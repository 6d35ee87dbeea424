from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from ...core.errors import ContractViolation
from .schemas import schemas_root


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    version: int
    file: str


def catalog_path() -> Path:
    return schemas_root() / "catalog.json"


def list_catalog_entries() -> list[CatalogEntry]:
    raw = json.loads(catalog_path().read_text(encoding="utf-8"))
    rows: list[CatalogEntry] = []
    for row in raw.get("schemas", []):
        name = str(row.get("name", "")).strip()
        file_name = str(row.get("file", "")).strip()
        if not name or not file_name:
            continue
        rows.append(CatalogEntry(name=name, version=int(row["version"]), file=file_name))
    return rows


def load_catalog() -> dict[str, CatalogEntry]:
    return {row.name: row for row in list_catalog_entries()}


def schema_path_for(schema_name: str) -> Path:
    entry = load_catalog().get(schema_name)
    if entry is None:
        raise ContractViolation(f"unknown schema: {schema_name}")
    return schemas_root() / entry.file
