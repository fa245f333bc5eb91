"""DatastoreReader: the port to the backing key-value store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .entity import Entity
    from .keys import Key
    from .native import NativeQuery, QueryBatch

#: A ``(kind, id)`` element of a key path.
PathElement = tuple[str, "str | int"]


@runtime_checkable
class KeyFactory(Protocol):
    """Builds store keys from a kind, an id and optional ancestors."""

    def key_for(
        self, kind: str, id: str | int, ancestors: Sequence[PathElement] = ()
    ) -> Key: ...


@runtime_checkable
class DatastoreReader(KeyFactory, Protocol):
    """
    Read access to the backing store.

    ``run_query`` is one round trip: it returns a single batch of the
    query's results and honours the query's limit server-side. Further
    batches of the same execution are requested by running the query
    again from the batch's ``end_cursor``.

    Implementations raise their own exceptions on failure; callers go
    through :class:`~kvquery_datastore.wrapper.DatastoreWrapper`, which
    converts them.
    """

    def run_query(self, query: NativeQuery) -> QueryBatch: ...

    def get(self, key: Key) -> Entity | None: ...

    def get_multi(self, keys: Sequence[Key]) -> list[Entity]: ...
