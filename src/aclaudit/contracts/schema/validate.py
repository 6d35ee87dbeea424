from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

import jsonschema

from ...core.errors import ContractViolation
from .catalog import schema_path_for


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> dict[str, Any]:
    return json.loads(schema_path_for(schema_name).read_text(encoding="utf-8"))


def validate(schema_name: str, payload: Any) -> None:
    try:
        jsonschema.validate(payload, load_schema(schema_name))
    except jsonschema.ValidationError as exc:
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        raise ContractViolation(f"schema validation failed for {schema_name} at {loc}: {exc.message}") from exc
