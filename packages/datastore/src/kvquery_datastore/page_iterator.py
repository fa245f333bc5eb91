"""Chaining paged executions of one native query."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .entity import Entity
    from .native import NativeQuery
    from .query_iterator import DsQueryIterator

logger = logging.getLogger("kvquery.datastore.page_iterator")


class DsQueryPageIterator:
    """
    Iterates the pages of a native query.

    Every page is a :class:`DsQueryIterator` over the query limited to
    ``page_size`` entities and started from where the previous page
    stopped. A limit on the original query is honoured across pages.

    :meth:`has_next` loads the following page to find out whether it holds
    anything, so at most one page is read ahead of the one last returned.
    Pages must be read through before asking for the next one, which
    :meth:`records` does::

        for entity in DsQueryPageIterator(query, wrapper.read, 100).records():
            ...
    """

    def __init__(
        self,
        query: NativeQuery,
        read: Callable[[NativeQuery], DsQueryIterator],
        page_size: int,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._read = read
        self._page_size = page_size
        self._limit = query.limit
        self._consumed = 0
        self._current: DsQueryIterator | None = None
        self._pending: DsQueryIterator | None = read(
            query.with_limit(self._page_limit(self._limit))
        )

    def _page_limit(self, remaining: int | None) -> int:
        if remaining is None:
            return self._page_size
        return min(self._page_size, remaining)

    def _load_next(self) -> DsQueryIterator | None:
        assert self._current is not None
        remaining = None
        if self._limit is not None:
            remaining = self._limit - self._consumed - self._current.returned
            if remaining <= 0:
                return None
        query = self._current.continuation_query()
        logger.debug("Loading next page of %s", query.kind)
        return self._read(query.with_limit(self._page_limit(remaining)))

    def has_next(self) -> bool:
        if self._pending is None:
            self._pending = self._load_next()
            if self._pending is None:
                return False
        return self._pending.has_next()

    def __next__(self) -> DsQueryIterator:
        if not self.has_next():
            raise StopIteration
        page = self._pending
        assert page is not None
        self._pending = None
        if self._current is not None:
            self._consumed += self._current.returned
        self._current = page
        return page

    def __iter__(self) -> DsQueryPageIterator:
        return self

    def records(self) -> Iterator[Entity]:
        """All entities of all pages as one lazy sequence."""
        while self.has_next():
            yield from next(self)
