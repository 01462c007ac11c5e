"""Helpers for reading OCM API payloads."""

from typing import Any


def nested(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a key is missing.

    Example:
        nested({"region": {"id": "us-east-1"}}, "region", "id") -> "us-east-1"
    """
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def search_by_state(state: str) -> str:
    """Build an OCM search expression filtering clusters by state."""
    escaped = state.replace("'", "''")
    return f"state = '{escaped}'"
