"""Common utility functions."""

from typing import Any


def get_value(obj: Any, key: str, *aliases: str) -> Any:
    """Get value from dict or object attribute, trying aliases in order."""
    for name in (key, *aliases):
        if isinstance(obj, dict):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def as_list(value: Any) -> list:
    """Treat None as empty and a lone string as a one-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)
