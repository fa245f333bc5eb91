"""IRecordLookup — read-side protocol consumed by storage façades."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from ..domain.record import EntityRecord
    from ..domain.specification import ISpecification


@runtime_checkable
class IRecordLookup(Protocol):
    """
    Read records of one kind by query or by identifiers.

    ``find`` accepts a ``StructuredQuery`` (specification together with
    ordering, limit and field mask) and returns a lazy, finite iterator.
    The iterator is **not** restartable: reading the same data again
    requires calling ``find`` with a fresh query::

        for record in lookup.find(query):
            ...
    """

    def find(self, query: Any) -> Iterator[EntityRecord]: ...

    def find_by_ids(
        self,
        ids: Iterable[Any],
        field_mask: Sequence[str] = (),
        *,
        predicate: ISpecification[Any] | None = None,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
    ) -> Iterator[EntityRecord]: ...
