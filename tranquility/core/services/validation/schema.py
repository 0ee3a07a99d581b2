"""
Structural validation — JSON Schema generated from the pydantic models.

The schema is derived from the same model the data is later loaded
into, so the two cannot drift apart.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jsonschema

from tranquility.core.services.validation.loader import DocumentKind
from tranquility.core.services.validation.report import Violation


@lru_cache(maxsize=None)
def schema_for(kind: DocumentKind) -> dict[str, Any]:
    """JSON Schema (draft 2020-12) for a document kind."""
    schema = kind.model.model_json_schema()
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    return schema


def _location(path: Any) -> str:
    return "/".join(str(p) for p in path)


def check_structure(value: Any, kind: DocumentKind) -> list[Violation]:
    """Every schema violation in ``value``, sorted by location."""
    validator = jsonschema.Draft202012Validator(schema_for(kind))
    errors = sorted(validator.iter_errors(value), key=lambda e: [str(p) for p in e.absolute_path])
    return [
        Violation("schema", _location(e.absolute_path), e.message)
        for e in errors
    ]
