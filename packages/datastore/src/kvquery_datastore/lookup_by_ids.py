"""Reading records by their identifiers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kvquery_specifications.structured_query import OrderBy

from .comparator import order_entities
from .field_mask import FieldMaskApplier
from .query_builder import validate_limit
from .records import EntityRecordMapper

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from kvquery_core.domain.record import EntityRecord
    from kvquery_core.domain.specification import ISpecification

    from .entity import Entity
    from .layout import RecordLayout
    from .wrapper import DatastoreWrapper

logger = logging.getLogger("kvquery.datastore.lookup_by_ids")


class DsLookupByIds:
    """
    Reads records of one kind by id with a bulk key read.

    Records come back in the order their ids were given; ids with no
    stored record are skipped. An optional predicate, ordering and limit
    are applied in memory on top of the read.
    """

    def __init__(
        self,
        wrapper: DatastoreWrapper,
        layout: RecordLayout,
        mapper: EntityRecordMapper | None = None,
    ) -> None:
        self._wrapper = wrapper
        self._layout = layout
        self._mapper = mapper or EntityRecordMapper()

    def _read(self, ids: Iterable[Any]) -> list[Entity | None]:
        keys = [self._layout.key_of(record_id, self._wrapper) for record_id in ids]
        return self._wrapper.get_multi(keys)

    def find(
        self,
        ids: Iterable[Any],
        field_mask: Sequence[str] = (),
        predicate: ISpecification[Any] | None = None,
        order_by: Sequence[OrderBy | str] | None = None,
        limit: int | None = None,
    ) -> Iterator[EntityRecord]:
        validate_limit(limit)
        entities = [entity for entity in self._read(ids) if entity is not None]
        if predicate is not None:
            entities = [e for e in entities if predicate.is_satisfied_by(e)]
        if order_by:
            entities = order_entities(entities, [OrderBy.parse(t) for t in order_by])
        if limit is not None:
            entities = entities[:limit]
        logger.debug("Found %d %s record(s) by id", len(entities), self._layout.kind)
        mask = FieldMaskApplier(field_mask)
        return iter([mask.apply(self._mapper.from_entity(e)) for e in entities])

    def find_active(
        self, ids: Iterable[Any], field_mask: Sequence[str] = ()
    ) -> list[EntityRecord | None]:
        """
        One item per id: the record if it is stored and active, else ``None``.
        """
        mask = FieldMaskApplier(field_mask)
        result: list[EntityRecord | None] = []
        for entity in self._read(ids):
            record = self._mapper.from_entity(entity) if entity is not None else None
            if record is None or not record.is_active:
                result.append(None)
            else:
                result.append(mask.apply(record))
        return result
