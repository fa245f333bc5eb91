"""Record lookup by structured query: decomposition, execution and merge."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from kvquery_core.ports.lookup import IRecordLookup
from kvquery_specifications.exceptions import ValidationError

from .comparator import order_entities
from .field_mask import FieldMaskApplier
from .lookup_by_ids import DsLookupByIds
from .query_builder import NativeQueryBuilder, validate_limit
from .records import EntityRecordMapper
from .settings import DatastoreQuerySettings
from .translator import PredicateTranslator

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from kvquery_core.domain.record import EntityRecord
    from kvquery_core.domain.specification import ISpecification
    from kvquery_specifications.structured_query import OrderBy, StructuredQuery

    from .entity import Entity
    from .keys import Key
    from .layout import RecordLayout
    from .native import NativeQuery
    from .wrapper import DatastoreWrapper

logger = logging.getLogger("kvquery.datastore.lookup")


class DsLookupByQueries:
    """
    Runs the native queries of one structured query and joins their results.

    A single native query is streamed as the store returns it; its
    ordering and limit were already applied by the store.

    Several native queries (one per OR branch) are each read in full, then
    concatenated in branch order. Entities found by more than one branch
    are kept once, at their first occurrence. The combined list is sorted
    and cut to the limit in memory, so this path holds every matching
    entity at once.
    """

    def __init__(
        self,
        wrapper: DatastoreWrapper,
        settings: DatastoreQuerySettings | None = None,
    ) -> None:
        self._wrapper = wrapper
        self._settings = settings or DatastoreQuerySettings()

    def execute(
        self,
        queries: Sequence[NativeQuery],
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> Iterator[Entity]:
        if len(queries) == 1:
            return self._read(queries[0])
        return iter(self._merge(queries, order_by, limit))

    def _read(self, query: NativeQuery) -> Iterator[Entity]:
        page_size = self._settings.page_size
        if page_size is None:
            return self._wrapper.read(query)
        return self._wrapper.read_paged(query, page_size).records()

    def _read_all(self, queries: Sequence[NativeQuery]) -> list[list[Entity]]:
        if self._settings.parallel_branches:
            workers = min(self._settings.max_workers, len(queries))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                return list(pool.map(lambda q: list(self._read(q)), queries))
        return [list(self._read(query)) for query in queries]

    def _merge(
        self,
        queries: Sequence[NativeQuery],
        order_by: Sequence[OrderBy],
        limit: int | None,
    ) -> list[Entity]:
        per_branch = self._read_all(queries)
        seen: set[Key] = set()
        merged: list[Entity] = []
        for entities in per_branch:
            for entity in entities:
                if entity.key not in seen:
                    seen.add(entity.key)
                    merged.append(entity)
        read = sum(len(entities) for entities in per_branch)
        if order_by:
            merged = order_entities(merged, order_by)
        if limit is not None:
            merged = merged[:limit]
        logger.debug(
            "Merged %d branches: %d read, %d distinct, %d returned",
            len(queries),
            read,
            len(seen),
            len(merged),
        )
        return merged


class DsRecordLookup(IRecordLookup):
    """
    Reads records of one kind.

    Usage::

        lookup = DsRecordLookup(DatastoreWrapper(reader), FlatLayout("User"))
        query = StructuredQuery(
            "User",
            specification=adults & (active | pending),
            order_by=["-created_at"],
            limit=10,
        )
        for record in lookup.find(query):
            ...

    Queries the store cannot express fail with ``TranslationError`` and
    malformed ones with ``ValidationError``, both before any read. Store
    failures surface as ``BackingStoreError``.
    """

    def __init__(
        self,
        wrapper: DatastoreWrapper,
        layout: RecordLayout,
        *,
        settings: DatastoreQuerySettings | None = None,
        mapper: EntityRecordMapper | None = None,
    ) -> None:
        self._layout = layout
        self._settings = settings or DatastoreQuerySettings()
        self._mapper = mapper or EntityRecordMapper()
        self._translator = PredicateTranslator(self._settings.capabilities)
        self._builder = NativeQueryBuilder(layout, wrapper)
        self._by_queries = DsLookupByQueries(wrapper, self._settings)
        self._by_ids = DsLookupByIds(wrapper, layout, self._mapper)

    @property
    def kind(self) -> str:
        return self._layout.kind

    def find(self, query: StructuredQuery) -> Iterator[EntityRecord]:
        if query.kind != self._layout.kind:
            raise ValidationError(
                f"Query for kind '{query.kind}' sent to the "
                f"'{self._layout.kind}' lookup",
                path="kind",
            )
        validate_limit(query.limit)
        branches = self._translator.translate(query.specification)
        native_queries = self._builder.build(query, branches)
        entities = self._by_queries.execute(
            native_queries, query.order_by, query.limit
        )
        mask = FieldMaskApplier(query.field_mask)
        return (mask.apply(self._mapper.from_entity(entity)) for entity in entities)

    def find_by_ids(
        self,
        ids: Iterable[Any],
        field_mask: Sequence[str] = (),
        *,
        predicate: ISpecification[Any] | None = None,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> Iterator[EntityRecord]:
        return self._by_ids.find(ids, field_mask, predicate, order_by, limit)

    def find_active(
        self, ids: Iterable[Any], field_mask: Sequence[str] = ()
    ) -> list[EntityRecord | None]:
        return self._by_ids.find_active(ids, field_mask)
