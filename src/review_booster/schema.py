"""Helpers to load and validate the client document and seed file schemas."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError

from .config import project_root

CLIENT_DOCUMENT_SCHEMA = "client_document_schema.json"
SEED_FILE_SCHEMA = "seed_file_schema.json"


def schema_dir() -> Path:
    """Return the directory holding the canonical JSON schemas."""
    return project_root() / "docs" / "templates"


@lru_cache(maxsize=4)
def load_schema(name: str = CLIENT_DOCUMENT_SCHEMA) -> Dict[str, Any]:
    """Load and cache a schema from docs/templates as a dictionary."""
    return json.loads((schema_dir() / name).read_text(encoding="utf-8"))


def format_errors(errors: Iterable[ValidationError]) -> str:
    """Turn jsonschema errors into a concise human-readable string."""
    parts = []
    for err in errors:
        location = ".".join(str(piece) for piece in err.absolute_path) or "<root>"
        parts.append(f"{location}: {err.message}")
    return "; ".join(parts)


def _validate(payload: Any, schema: Dict[str, Any]) -> Any:
    validator = Draft202012Validator(schema, format_checker=FormatChecker())
    errors = list(validator.iter_errors(payload))
    if errors:
        raise ValueError(f"Schema validation failed: {format_errors(errors)}")
    return payload


def validate_client_document(
    payload: Dict[str, Any], schema: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Validate a stored client document.

    Raises ValueError with a readable message if validation fails.
    """
    return _validate(payload, schema or load_schema(CLIENT_DOCUMENT_SCHEMA))


def validate_seed_file(
    payload: Any, schema: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Validate a seed file payload; it must carry a `reviews` array of strings."""
    return _validate(payload, schema or load_schema(SEED_FILE_SCHEMA))
