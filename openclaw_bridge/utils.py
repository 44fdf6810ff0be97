"""
Helpers for reading engine payloads defensively.

Every engine payload field is optional and may carry the wrong JSON type.
Lookups try an ordered list of candidate keys and treat a value of the wrong
type exactly like a missing one.
"""

import json
from collections.abc import Mapping
from typing import Any

from .result import Error, Ok, Result


def _parse_json_safely(json_str: str) -> Result[Any, str]:
    """
    Parse JSON text, returning Result instead of raising.

    Args:
        json_str: JSON text to parse

    Returns:
        Ok(value) if parsing succeeds, Error(str) if parsing fails
    """
    try:  # nosemgrep: forbid-try-except
        return Ok(json.loads(json_str))
    except json.JSONDecodeError as e:
        return Error(f"JSON decode error: {e!s}")


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return value if it is a JSON object, otherwise an empty mapping."""
    if isinstance(value, Mapping):
        return value
    return {}


def first_str(payload: Mapping[str, Any], *keys: str, default: str | None = None) -> str | None:
    """
    Return the first string value found under keys, in order.

    Empty strings count as present, matching the engine's "field was sent"
    semantics. Non-string values are skipped.
    """
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str):
            return value
    return default


def first_number(payload: Mapping[str, Any], *keys: str, default: int | float = 0) -> int | float:
    """Return the first numeric (non-bool) value found under keys, in order."""
    for key in keys:
        value = payload.get(key)
        if isinstance(value, int | float) and not isinstance(value, bool):
            return value
    return default


def coalesce(*values: str | None, default: str = "") -> str:
    """Return the first value that is not None (empty strings count as present)."""
    for value in values:
        if value is not None:
            return value
    return default
