"""Adapting predicate values to their stored representation."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any


def to_store_value(value: Any) -> Any:
    """
    Convert a filter value to the form properties are stored in.

    Enums are stored by value and naive datetimes are taken to be UTC.
    Sequences are converted element-wise; everything else is stored as is.
    """
    if isinstance(value, Enum):
        return to_store_value(value.value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, list | tuple):
        return type(value)(to_store_value(item) for item in value)
    return value
