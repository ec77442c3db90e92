"""
Helpers for reading loosely-typed JSON payloads.

ESPN payloads move fields around between endpoints, so values are read through
an ordered list of strategies; the first strategy that yields a value wins.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

Strategy = Callable[[Any], Optional[T]]


def safe_int(v, default=0) -> int:
    """Convert a value to a non-negative int safely; return default on failures."""
    if isinstance(v, bool):
        return default
    try:
        n = int(float(v))
    except (TypeError, ValueError, OverflowError):
        return default
    return n if n >= 0 else default


def safe_float(v, default: float = 0.0) -> float:
    """Convert a value to float safely; return default on failures."""
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def get_nested(obj: Any, path: list, default=None):
    """
    Safely access nested dict keys / list indexes by path; return default if missing.

    Example:
      get_nested(comp, ["broadcasts", 0, "media", "shortName"])
    """
    cur = obj
    for k in path:
        if isinstance(k, int):
            if not isinstance(cur, list) or not -len(cur) <= k < len(cur):
                return default
            cur = cur[k]
        else:
            if not isinstance(cur, dict):
                return default
            cur = cur.get(k)
    return cur if cur is not None else default


def as_dict(v) -> dict:
    """Return v if it is a dict, else an empty dict."""
    return v if isinstance(v, dict) else {}


def as_list(v) -> list:
    """Return v if it is a list, else an empty list."""
    return v if isinstance(v, list) else []


def path(*keys) -> Strategy:
    """Build a strategy that reads a nested path and yields a non-blank value."""

    def read(obj):
        val = get_nested(obj, list(keys))
        if isinstance(val, str):
            return val.strip() or None
        return val

    return read


def first_present(obj: Any, strategies: Iterable[Strategy], default: Optional[T] = None) -> Optional[T]:
    """Run strategies in order and return the first non-None result."""
    for strategy in strategies:
        val = strategy(obj)
        if val is not None:
            return val
    return default
