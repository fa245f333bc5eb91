"""
Value casting helpers for specifications parsed from dicts / JSON.

Pure-Python, no infrastructure dependencies.
"""

from __future__ import annotations

import datetime
from typing import Any

_INTEGER_TYPES = frozenset({"integer", "int", "long"})
_FLOAT_TYPES = frozenset({"float", "double"})
_STRING_TYPES = frozenset({"string", "text", "str"})
_BOOLEAN_TYPES = frozenset({"boolean", "bool"})


def cast_value(value: Any, value_type: str | None = None) -> Any:
    """
    Cast *value* to the Python type named by *value_type*.

    If *value* is a list, each item is cast recursively. ``None`` or an
    unknown *value_type* passes the value through unchanged, as does a
    value that fails to convert.

    Supported *value_type* strings: ``string``, ``text``, ``integer``,
    ``int``, ``long``, ``float``, ``double``, ``boolean``, ``date``,
    ``datetime``.
    """
    if isinstance(value, list):
        return [cast_value(item, value_type) for item in value]
    if value_type is None:
        return value
    try:
        return _cast_explicit(value, value_type.lower())
    except (ValueError, TypeError):
        return value


def _cast_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _cast_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    result = datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if result.tzinfo is not None:
        result = result.astimezone(datetime.timezone.utc)
    return result


def _cast_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.date):
        return value
    return datetime.datetime.fromisoformat(str(value)).date()


def _cast_explicit(value: Any, vt: str) -> Any:
    if vt in _STRING_TYPES:
        return str(value)
    if vt in _INTEGER_TYPES:
        return int(value)
    if vt in _FLOAT_TYPES:
        return float(value)
    if vt in _BOOLEAN_TYPES:
        return _cast_boolean(value)
    if vt == "datetime":
        return _cast_datetime(value)
    if vt == "date":
        return _cast_date(value)
    return value
