"""
Normalization of loosely-typed tool arguments.

Agents send the same logical parameter in several encodings (a JSON array or a
comma-separated string, an object or a JSON string holding an object). Everything
here collapses those into one canonical Python value before any request is built.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .client import AsanaParseError, AsanaValidationError

ListLike = Union[Sequence[str], str, None]
ObjectLike = Union[Mapping[str, Any], str]


def split_list(value: ListLike, *, name: str = "value") -> List[str]:
    """
    Return an ordered list of trimmed, non-empty tokens.

    "a, b ,, c" and ["a", " b", "", "c"] both yield ["a", "b", "c"].
    Duplicates are preserved.
    """
    if value is None:
        return []
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, (list, tuple)):
        tokens = []
        for item in value:
            if not isinstance(item, (str, int)) or isinstance(item, bool):
                raise AsanaValidationError(
                    f"{name} must contain only strings or integers, got {type(item).__name__}."
                )
            tokens.append(str(item))
    else:
        raise AsanaValidationError(
            f"{name} must be a list of strings or a comma-separated string."
        )
    return [t.strip() for t in tokens if t.strip()]


def parse_json_object(value: ObjectLike, *, name: str = "value") -> Dict[str, Any]:
    """Decode a mapping that may arrive as a JSON string."""
    if isinstance(value, Mapping):
        return dict(value)
    if not isinstance(value, str):
        raise AsanaValidationError(
            f"{name} must be an object or a JSON-encoded object string."
        )
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise AsanaParseError(
            f"{name} is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            parameter=name,
        ) from exc
    if not isinstance(decoded, dict):
        raise AsanaValidationError(
            f"{name} must decode to a JSON object, got {type(decoded).__name__}."
        )
    return decoded


def parse_optional_json_object(
    value: Optional[ObjectLike], *, name: str = "value"
) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_json_object(value, name=name)


__all__ = [
    "ListLike",
    "ObjectLike",
    "split_list",
    "parse_json_object",
    "parse_optional_json_object",
]
