"""Tolerant accessors for untyped JSON response graphs.

The GitHub schema leaves most fields optional, so an absent path is a normal
case: every accessor returns an empty value instead of raising.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

Key = Union[str, int]


def get_node(node: Any, *keys: Key) -> Any:
    """Follow ``keys`` from ``node`` and return the value reached, or ``None``.

    String keys index mappings, integer keys index lists. Any missing key,
    out-of-range index or type mismatch along the way yields ``None``.
    """
    current = node
    for key in keys:
        if isinstance(key, int) and isinstance(current, list):
            if not -len(current) <= key < len(current):
                return None
            current = current[key]
        elif isinstance(current, dict):
            current = current.get(key)
        else:
            return None
        if current is None:
            return None
    return current


def get_str(node: Any, *keys: Key) -> str:
    """Return the string at ``keys``, or ``""`` when absent or not a string."""
    value = get_node(node, *keys)
    return value if isinstance(value, str) else ""


def get_list(node: Any, *keys: Key) -> List[Any]:
    """Return the list at ``keys``, or ``[]`` when absent or not a list."""
    value = get_node(node, *keys)
    return value if isinstance(value, list) else []


def get_int(node: Any, *keys: Key) -> Optional[int]:
    """Return the integral number at ``keys``, or ``None``.

    JSON decoders may hand back whole numbers as floats; those are accepted.
    """
    value = get_node(node, *keys)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
