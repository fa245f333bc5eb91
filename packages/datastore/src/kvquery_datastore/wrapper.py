"""DatastoreWrapper: the engine's single gateway to the backing store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import BackingStoreError
from .page_iterator import DsQueryPageIterator
from .query_iterator import DsQueryIterator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from .connector import DatastoreReader, PathElement
    from .entity import Entity
    from .keys import Key
    from .native import NativeQuery, QueryBatch

logger = logging.getLogger("kvquery.datastore.wrapper")

MAX_KEYS_PER_READ_REQUEST = 1000


class DatastoreWrapper:
    """
    Reads through a :class:`DatastoreReader`.

    Any exception raised by the reader is logged and re-raised as
    :class:`BackingStoreError`, chained to the original. Nothing is
    retried; retry policy belongs to the connector.
    """

    def __init__(self, reader: DatastoreReader) -> None:
        self._reader = reader

    @property
    def reader(self) -> DatastoreReader:
        return self._reader

    def _call(self, action: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            logger.exception("Backing store failed to %s", action)
            raise BackingStoreError(f"Failed to {action}: {e}") from e

    def run(self, query: NativeQuery) -> QueryBatch:
        """One round trip for *query*."""
        logger.debug(
            "Running query on %s (limit=%s, resumed=%s)",
            query.kind,
            query.limit,
            query.start_cursor is not None,
        )
        batch: QueryBatch = self._call(
            f"run query on {query.kind}", self._reader.run_query, query
        )
        return batch

    def read(self, query: NativeQuery) -> DsQueryIterator:
        """Lazily read all results of *query*, batch by batch."""
        return DsQueryIterator(query, self.run)

    def read_paged(self, query: NativeQuery, page_size: int) -> DsQueryPageIterator:
        """Read *query* as a chain of pages of at most *page_size* entities."""
        return DsQueryPageIterator(query, self.read, page_size)

    def get(self, key: Key) -> Entity | None:
        entity: Entity | None = self._call(f"read {key}", self._reader.get, key)
        return entity

    def get_multi(self, keys: Iterable[Key]) -> list[Entity | None]:
        """
        Read entities by key.

        The result is aligned with *keys*: one item per key, ``None`` where
        no entity is stored. Large key sets are read in chunks of
        ``MAX_KEYS_PER_READ_REQUEST``.
        """
        keys = list(keys)
        if len(keys) > MAX_KEYS_PER_READ_REQUEST:
            logger.debug(
                "Reading %d keys in %d requests",
                len(keys),
                -(-len(keys) // MAX_KEYS_PER_READ_REQUEST),
            )
        found: dict[Key, Entity] = {}
        for start in range(0, len(keys), MAX_KEYS_PER_READ_REQUEST):
            chunk = keys[start : start + MAX_KEYS_PER_READ_REQUEST]
            entities: list[Entity] = self._call(
                f"read {len(chunk)} keys", self._reader.get_multi, chunk
            )
            found.update((entity.key, entity) for entity in entities)
        return [found.get(key) for key in keys]

    def key_for(
        self, kind: str, id: str | int, ancestors: Sequence[PathElement] = ()
    ) -> Key:
        return self._reader.key_for(kind, id, ancestors)
