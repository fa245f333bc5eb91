"""Native query model: what the backing store can execute in one query."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from kvquery_specifications.operators import INEQUALITY_OPERATORS

if TYPE_CHECKING:
    from kvquery_specifications.operators import SpecificationOperator
    from kvquery_specifications.structured_query import OrderBy

    from .entity import Entity
    from .keys import Key


class MoreResults(str, Enum):
    """Why a batch ended."""

    NOT_FINISHED = "not_finished"
    MORE_RESULTS_AFTER_LIMIT = "more_results_after_limit"
    MORE_RESULTS_AFTER_CURSOR = "more_results_after_cursor"
    NO_MORE_RESULTS = "no_more_results"


@dataclass(frozen=True, slots=True)
class Cursor:
    """Opaque position within one native query's result stream.

    Only ever taken from a batch and handed back to the store; its
    token is not interpreted here.
    """

    token: bytes

    def __repr__(self) -> str:
        return "Cursor(...)"


@dataclass(frozen=True, slots=True)
class PropertyFilter:
    """A single ``property <op> value`` condition."""

    property: str
    op: SpecificationOperator
    value: Any

    @property
    def is_inequality(self) -> bool:
        return self.op in INEQUALITY_OPERATORS

    def __repr__(self) -> str:
        return f"{self.property} {self.op.value} {self.value!r}"


@dataclass(frozen=True)
class NativeQuery:
    """
    A query the store runs as is: an AND of property filters, an optional
    ancestor constraint, ordering, limit and a start cursor.

    ``limit=None`` leaves the result size to the store.
    """

    kind: str
    filters: tuple[PropertyFilter, ...] = ()
    ancestor: Key | None = None
    order: tuple[OrderBy, ...] = ()
    limit: int | None = None
    start_cursor: Cursor | None = None

    @property
    def inequality_properties(self) -> list[str]:
        """Properties constrained by a range filter, in filter order."""
        seen: list[str] = []
        for prop_filter in self.filters:
            if prop_filter.is_inequality and prop_filter.property not in seen:
                seen.append(prop_filter.property)
        return seen

    def with_start_cursor(self, cursor: Cursor | None) -> NativeQuery:
        return replace(self, start_cursor=cursor)

    def with_limit(self, limit: int | None) -> NativeQuery:
        return replace(self, limit=limit)


@dataclass(frozen=True, slots=True)
class EntityResult:
    """An entity together with the cursor pointing right after it."""

    entity: Entity
    cursor: Cursor


@dataclass(frozen=True)
class QueryBatch:
    """The outcome of one round trip for a native query."""

    results: tuple[EntityResult, ...]
    end_cursor: Cursor | None
    more_results: MoreResults

    @property
    def entities(self) -> list[Entity]:
        return [result.entity for result in self.results]

    def __len__(self) -> int:
        return len(self.results)
