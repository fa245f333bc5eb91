"""Mapping between domain records and stored entities."""

from __future__ import annotations

import copy
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from kvquery_core.domain.record import METADATA_FIELDS, EntityRecord

from .entity import Entity
from .values import to_store_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .keys import Key

#: Property holding the record's full state.
STATE_PROPERTY = "state"

RESERVED_PROPERTIES: frozenset[str] = METADATA_FIELDS | {STATE_PROPERTY}

_SCALAR_TYPES = (str, bytes, bool, int, float, Decimal, date, Enum)


class EntityRecordMapper:
    """
    Record ↔ entity mapper.

    The record state is stored whole under the ``state`` property, next to
    the lifecycle flags. Columns are state fields copied to top-level
    properties so that native queries can filter and order by them. By
    default every top-level scalar field of the state is a column; pass
    ``columns`` to choose them explicitly.
    """

    def __init__(self, *, columns: Sequence[str] | None = None) -> None:
        if columns is not None:
            clashing = sorted(set(columns) & RESERVED_PROPERTIES)
            if clashing:
                raise ValueError(f"Column names are reserved: {clashing}")
            columns = tuple(columns)
        self._columns = columns

    def columns_of(self, record: EntityRecord) -> dict[str, Any]:
        if self._columns is not None:
            return {name: record.state.get(name) for name in self._columns}
        return {
            name: value
            for name, value in record.state.items()
            if name not in RESERVED_PROPERTIES
            and (value is None or isinstance(value, _SCALAR_TYPES))
        }

    def to_entity(self, record: EntityRecord, key: Key) -> Entity:
        properties: dict[str, Any] = {
            name: to_store_value(value)
            for name, value in self.columns_of(record).items()
        }
        properties[STATE_PROPERTY] = copy.deepcopy(record.state)
        properties["archived"] = record.archived
        properties["deleted"] = record.deleted
        properties["version"] = record.version
        return Entity(key, properties)

    def from_entity(self, entity: Entity) -> EntityRecord:
        return EntityRecord(
            id=entity.key.id,
            state=copy.deepcopy(entity.get(STATE_PROPERTY) or {}),
            archived=bool(entity.get("archived", False)),
            deleted=bool(entity.get("deleted", False)),
            version=int(entity.get("version", 0)),
        )
