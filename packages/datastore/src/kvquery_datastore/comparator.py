"""Ordering of entities by property values, as the store orders them."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from .exceptions import DatastoreQueryError
from .values import to_store_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from kvquery_specifications.structured_query import OrderBy

# Values of different types never compare directly; they are ranked first.
_NULL, _NUMBER, _TIMESTAMP, _BOOLEAN, _BYTES, _STRING = range(6)


def sort_value(value: Any) -> tuple[int, Any]:
    """
    Sort key of a single property value.

    ``None`` sorts before everything else. Values of one type compare
    naturally; across types the order is numbers, timestamps, booleans,
    byte strings, then text.
    """
    value = to_store_value(value)
    if value is None:
        return (_NULL, 0)
    if isinstance(value, bool):
        return (_BOOLEAN, value)
    if isinstance(value, int | float | Decimal):
        return (_NUMBER, value)
    if isinstance(value, datetime):
        return (_TIMESTAMP, value)
    if isinstance(value, date):
        return (_TIMESTAMP, datetime.combine(value, time(), tzinfo=timezone.utc))
    if isinstance(value, bytes):
        return (_BYTES, value)
    if isinstance(value, str):
        return (_STRING, value)
    raise DatastoreQueryError(
        f"Cannot order by a value of type {type(value).__name__}: {value!r}"
    )


def property_value(entity: Mapping[str, Any], path: str) -> Any:
    """Value at a dotted *path* of *entity*, ``None`` where missing."""
    value: Any = entity
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def order_entities(
    entities: Iterable[Mapping[str, Any]], order_by: Sequence[OrderBy]
) -> list[Any]:
    """
    Sort *entities* by the ordering terms, most significant first.

    The sort is stable: entities equal under every term keep their
    relative order.
    """
    result = list(entities)
    for term in reversed(order_by):
        result.sort(
            key=lambda entity, f=term.field: sort_value(property_value(entity, f)),
            reverse=term.descending,
        )
    return result
