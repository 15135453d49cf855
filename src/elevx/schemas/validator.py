"""Schema validation utilities for elevx using package data."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib.resources import files
from typing import Any

from jsonschema.validators import Draft202012Validator


@lru_cache(maxsize=None)
def get_schema(schema_name: str) -> dict[str, Any]:
    """Load a packaged schema by name (without ``.schema.json``).

    Raises:
        KeyError: If the schema is not shipped with the package.
        ValueError: If the schema file is malformed.
    """
    resource = files("elevx.schemas") / f"{schema_name}.schema.json"
    if not resource.is_file():
        raise KeyError(f"Schema '{schema_name}' not found in elevx package data.")
    try:
        res: dict[str, Any] = json.loads(resource.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Schema '{schema_name}' contains invalid JSON: {e}\n"
            f"This may indicate a corrupted installation. Try reinstalling elevx."
        ) from e
    return res


def validate_data(data: Any, schema_name: str) -> list[str]:
    """Validate data against a packaged schema.

    Returns:
        Error messages, ``path: message`` where a path exists. Empty when valid.
    """
    validator = Draft202012Validator(get_schema(schema_name))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    return [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}"
        if e.path
        else e.message
        for e in errors
    ]
