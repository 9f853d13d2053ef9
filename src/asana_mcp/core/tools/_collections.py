"""
Shared helpers for working with Asana's {"data": ...} envelopes.
"""

from typing import Any, Dict, List

from asana_mcp.core.client import AsanaResponseParseError


def data_object(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract the single record from an Asana payload.
    An empty body (e.g. from DELETE) yields {}.
    """
    data = payload.get("data", {})
    if not isinstance(data, dict):
        raise AsanaResponseParseError("Expected data to be an object.")
    return data


def data_list(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Extract the record list from an Asana collection payload.
    Raises AsanaResponseParseError if the expected structure is missing or malformed.
    """
    data = payload.get("data", [])
    if not isinstance(data, list):
        raise AsanaResponseParseError("Expected data to be a list.")
    return [e for e in data if isinstance(e, dict)]


def next_offset(payload: Dict[str, Any]) -> Any:
    """Offset token for the next page, or None on the last page."""
    next_page = payload.get("next_page")
    if isinstance(next_page, dict):
        return next_page.get("offset")
    return None
