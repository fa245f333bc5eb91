"""Lazy, cursor-resumable iteration over one native query execution."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum
from typing import TYPE_CHECKING

from .native import MoreResults

if TYPE_CHECKING:
    from collections.abc import Callable

    from .entity import Entity
    from .native import Cursor, NativeQuery, QueryBatch

logger = logging.getLogger("kvquery.datastore.query_iterator")


class IteratorState(str, Enum):
    FRESH = "fresh"
    IN_PAGE = "in_page"
    EXHAUSTED = "exhausted"


class DsQueryIterator(Iterator["Entity"]):
    """
    Iterates the results of one native query.

    The first batch is fetched on construction. The store may answer a
    query in several batches; the next batch of the same execution is
    fetched only when :meth:`has_next` finds the loaded one read through.
    The query's limit counts the entities returned by this iterator,
    across all batches.

    The iterator is forward-only and cannot be restarted. To go on
    reading from where it stopped, run :meth:`continuation_query`.
    """

    def __init__(
        self, query: NativeQuery, run: Callable[[NativeQuery], QueryBatch]
    ) -> None:
        self._query = query
        self._run = run
        self._limit = query.limit
        self._returned = 0
        self._terminated = False
        self._batch_start: Cursor | None = query.start_cursor
        self._batch = run(query)
        self._position = 0

    @property
    def query(self) -> NativeQuery:
        return self._query

    @property
    def returned(self) -> int:
        """Entities handed out so far."""
        return self._returned

    @property
    def state(self) -> IteratorState:
        if self._terminated or self._limit_reached() or self._at_end():
            return IteratorState.EXHAUSTED
        if self._returned == 0:
            return IteratorState.FRESH
        return IteratorState.IN_PAGE

    def has_next(self) -> bool:
        if self._terminated:
            return False
        if self._limit_reached() or self._at_end():
            self._terminated = True
            return False
        while self._position >= len(self._batch):
            self._fetch_next_batch()
            if self._at_end():
                self._terminated = True
                return False
        return True

    def _limit_reached(self) -> bool:
        return self._limit is not None and self._returned >= self._limit

    def _at_end(self) -> bool:
        """The loaded batch is read through and the store has no more."""
        return (
            self._position >= len(self._batch)
            and self._batch.more_results is not MoreResults.NOT_FINISHED
        )

    def _fetch_next_batch(self) -> None:
        remaining = None if self._limit is None else self._limit - self._returned
        self._batch_start = self._batch.end_cursor
        follow_up = self._query.with_start_cursor(self._batch_start).with_limit(
            remaining
        )
        logger.debug("Fetching next batch of %s", self._query.kind)
        self._batch = self._run(follow_up)
        self._position = 0

    def __next__(self) -> Entity:
        if not self.has_next():
            raise StopIteration
        result = self._batch.results[self._position]
        self._position += 1
        self._returned += 1
        return result.entity

    def __iter__(self) -> DsQueryIterator:
        return self

    def continuation_query(self) -> NativeQuery:
        """The same query, starting right after the last entity returned."""
        if self._position > 0:
            cursor = self._batch.results[self._position - 1].cursor
        else:
            cursor = self._batch.end_cursor or self._batch_start
        return self._query.with_start_cursor(cursor)
