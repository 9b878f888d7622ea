"""
Conversion of graph-store values into plain, JSON-serializable structures.

Integers outside the range a double can represent exactly (+/- 2**53 - 1)
are returned as decimal strings rather than silently losing precision,
since raw graph identifiers and money columns can be large.
"""

import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase

MAX_SAFE_INTEGER = 2 ** 53 - 1


def narrow_int(value: int) -> int | str:
    """Return value unchanged when safely representable, else its decimal string."""
    if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER:
        return value
    return str(value)


def node_properties(node: DeclarativeBase) -> Dict[str, Any]:
    """
    Flatten an ORM node record into a mapping of column name to value.

    Relationships are not followed; only the node's own columns are kept.
    """
    mapper = inspect(node).mapper
    return {attr.key: getattr(node, attr.key) for attr in mapper.column_attrs}


def to_native_types(value: Any) -> Any:
    """
    Recursively convert a value into JSON-safe Python types.

    - bool and None pass through
    - int is narrowed with narrow_int()
    - Decimal becomes int (narrowed) when integral, else float
    - non-finite floats become None
    - date, datetime and time become ISO-8601 strings
    - mappings become dicts, lists/tuples/sets become lists
    - ORM node records become flat property dicts
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return narrow_int(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        if value == value.to_integral_value():
            return narrow_int(int(value))
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, DeclarativeBase):
        return to_native_types(node_properties(value))
    if isinstance(value, Mapping):
        return {str(key): to_native_types(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_native_types(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [to_native_types(item) for item in sorted(value, key=repr)]
    raise TypeError(f"Cannot convert value of type {type(value).__name__} to a native type")
