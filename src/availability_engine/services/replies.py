"""Helpers for reading inventory replies whose repeated elements may be single or listed."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional


def as_list(value: Any) -> List[Any]:
    """Normalize an upstream element that may be absent, a single mapping, or a list."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    if isinstance(value, tuple):
        return [item for item in value if item is not None]
    return [value]


def dig(payload: Any, *keys: str, default: Any = None) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value in (None, ""):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def as_number(value: Any, default: int | float = 0) -> int | float:
    if value in (None, ""):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return int(number) if number.is_integer() else number


def as_text(value: Any) -> Optional[str]:
    if value in (None, ""):
        return None
    return str(value)


def is_yes(value: Any) -> bool:
    return isinstance(value, str) and value.strip().upper() == "Y"
