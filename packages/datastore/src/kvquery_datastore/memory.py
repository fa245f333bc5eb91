"""InMemoryDatastore: a dict-backed reader for tests and local runs."""

from __future__ import annotations

import base64
import copy
import logging
from typing import TYPE_CHECKING, Any

from kvquery_specifications.operators_memory import build_default_registry

from .comparator import order_entities
from .entity import Entity
from .keys import Key
from .native import Cursor, EntityResult, MoreResults, QueryBatch

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .connector import PathElement
    from .native import NativeQuery, PropertyFilter

logger = logging.getLogger("kvquery.datastore.memory")

_CURSOR_PREFIX = b"offset:"


def _encode_cursor(offset: int) -> Cursor:
    return Cursor(base64.urlsafe_b64encode(_CURSOR_PREFIX + str(offset).encode()))


def _detached(entity: Entity) -> Entity:
    return Entity(entity.key, copy.deepcopy(dict(entity)))


def _decode_cursor(cursor: Cursor | None) -> int:
    if cursor is None:
        return 0
    raw = base64.urlsafe_b64decode(cursor.token)
    if not raw.startswith(_CURSOR_PREFIX):
        raise ValueError("Cursor was not issued by this datastore")
    return int(raw[len(_CURSOR_PREFIX) :])


class InMemoryDatastore:
    """
    In-memory store honouring the restrictions of native queries.

    Queries are AND-only and may range over one property at most; results
    are ordered by key unless the query orders them, and come back in
    batches of at most ``batch_size`` entities (``None`` returns the whole
    result in one batch). Cursors are opaque to callers.

    Reads hand out copies: two reads of one entity return equal, distinct
    objects.

    Every round trip is recorded in ``run_calls`` and ``get_calls``.
    ``fail_with`` makes round trips raise, to exercise error handling.
    """

    def __init__(self, *, namespace: str = "", batch_size: int | None = None) -> None:
        if batch_size is not None and batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.namespace = namespace
        self.batch_size = batch_size
        self.run_calls: list[NativeQuery] = []
        self.get_calls: list[list[Key]] = []
        self._entities: dict[Key, Entity] = {}
        self._registry = build_default_registry()
        self._failure: Exception | None = None
        self._fail_after = 0

    # -- writing -------------------------------------------------------------

    def put(self, *entities: Entity) -> None:
        for entity in entities:
            self._entities[entity.key] = entity

    def delete(self, *keys: Key) -> None:
        for key in keys:
            self._entities.pop(key, None)

    def clear(self) -> None:
        self._entities.clear()
        self.run_calls.clear()
        self.get_calls.clear()

    def __len__(self) -> int:
        return len(self._entities)

    # -- failure injection ---------------------------------------------------

    def fail_with(self, error: Exception, *, after: int = 0) -> None:
        """Raise *error* from every round trip after *after* successful ones."""
        self._failure = error
        self._fail_after = after

    def heal(self) -> None:
        self._failure = None

    def _round_trip(self) -> None:
        if self._failure is None:
            return
        if self._fail_after <= 0:
            raise self._failure
        self._fail_after -= 1

    # -- DatastoreReader -----------------------------------------------------

    def key_for(
        self, kind: str, id: str | int, ancestors: Sequence[PathElement] = ()
    ) -> Key:
        parent = None
        for parent_kind, parent_id in ancestors:
            parent = Key(parent_kind, parent_id, parent, self.namespace)
        return Key(kind, id, parent, self.namespace)

    def get(self, key: Key) -> Entity | None:
        self._round_trip()
        self.get_calls.append([key])
        entity = self._entities.get(key)
        return _detached(entity) if entity is not None else None

    def get_multi(self, keys: Sequence[Key]) -> list[Entity]:
        self._round_trip()
        self.get_calls.append(list(keys))
        found = {
            key: _detached(self._entities[key])
            for key in keys
            if key in self._entities
        }
        # Like a real store, no particular order is promised.
        return sorted(found.values(), key=lambda e: e.key.sort_key(), reverse=True)

    def run_query(self, query: NativeQuery) -> QueryBatch:
        self._round_trip()
        self.run_calls.append(query)

        ranged = query.inequality_properties
        if len(ranged) > 1:
            raise ValueError(
                f"Inequality filters are limited to one property, got {ranged}"
            )

        matches = [
            entity
            for entity in sorted(self._entities.values(), key=lambda e: e.key.sort_key())
            if self._matches(entity, query)
        ]
        if query.order:
            matches = order_entities(matches, query.order)

        start = _decode_cursor(query.start_cursor)
        size = len(matches) - start
        if query.limit is not None:
            size = min(size, query.limit)
        if self.batch_size is not None:
            size = min(size, self.batch_size)
        size = max(size, 0)
        end = start + size

        results = tuple(
            EntityResult(_detached(entity), _encode_cursor(start + offset + 1))
            for offset, entity in enumerate(matches[start:end])
        )
        if end >= len(matches):
            more = MoreResults.NO_MORE_RESULTS
        elif query.limit is not None and size == query.limit:
            more = MoreResults.MORE_RESULTS_AFTER_LIMIT
        else:
            more = MoreResults.NOT_FINISHED
        logger.debug(
            "Query on %s returned %d of %d matches (%s)",
            query.kind,
            len(results),
            len(matches),
            more.value,
        )
        return QueryBatch(results, _encode_cursor(end), more)

    def _matches(self, entity: Entity, query: NativeQuery) -> bool:
        key = entity.key
        if key.kind != query.kind or key.namespace != self.namespace:
            return False
        if query.ancestor is not None and not key.is_descendant_of(query.ancestor):
            return False
        return all(self._satisfies(entity, f) for f in query.filters)

    def _satisfies(self, entity: Entity, prop_filter: PropertyFilter) -> bool:
        # Entities without the property are not indexed for it.
        if prop_filter.property not in entity:
            return False
        actual: Any = entity[prop_filter.property]
        return self._registry.evaluate(prop_filter.op, actual, prop_filter.value)
