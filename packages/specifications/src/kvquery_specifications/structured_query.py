"""
StructuredQuery — a read request against one record kind.

The specification defines *what* to match; ordering, limit and field
mask define *how* results come back.  A query is built per read and
consumed by the persistence layer, never by the specification itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from kvquery_core.domain.specification import ISpecification


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class OrderBy:
    """A single ordering term."""

    field: str
    direction: Direction = Direction.ASC

    @property
    def descending(self) -> bool:
        return self.direction is Direction.DESC

    @classmethod
    def parse(cls, term: OrderBy | str | tuple[str, str]) -> OrderBy:
        """
        Accept ``OrderBy``, ``"-field"`` / ``"field"`` strings, or
        ``(field, "asc"|"desc")`` tuples.
        """
        if isinstance(term, OrderBy):
            return term
        if isinstance(term, tuple):
            name, direction = term
            return cls(name, Direction(str(direction).lower()))
        if term.startswith("-"):
            return cls(term[1:], Direction.DESC)
        return cls(term)

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


@dataclass(frozen=True)
class StructuredQuery:
    """
    Immutable read request.

    Attributes:
        kind: Record kind to read.
        specification: Filter predicate (``None`` = match all).
        order_by: Ordering terms, most significant first. Strings with a
            ``-`` prefix sort descending, e.g. ``["-created_at", "name"]``.
        limit: Maximum number of results (``None`` = unbounded).
        field_mask: Dotted paths of the record state to keep
            (empty = full state).
        active_only: Skip archived and deleted records.
    """

    kind: str
    specification: ISpecification[Any] | None = None
    order_by: list[OrderBy] = field(default_factory=list)
    limit: int | None = None
    field_mask: list[str] = field(default_factory=list)
    active_only: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "order_by", [OrderBy.parse(term) for term in self.order_by]
        )
        object.__setattr__(self, "field_mask", list(self.field_mask))

    def with_specification(self, spec: ISpecification[Any] | None) -> StructuredQuery:
        """Return a copy with the specification replaced."""
        return replace(self, specification=spec)

    def with_limit(self, limit: int | None) -> StructuredQuery:
        """Return a copy with the limit replaced."""
        return replace(self, limit=limit)

    def with_ordering(self, *terms: OrderBy | str) -> StructuredQuery:
        """Return a copy with updated ordering."""
        return replace(self, order_by=list(terms))

    def with_field_mask(self, *paths: str) -> StructuredQuery:
        """Return a copy with updated field mask."""
        return replace(self, field_mask=list(paths))

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {"kind": self.kind}
        if self.specification is not None:
            result["specification"] = self.specification.to_dict()
        if self.order_by:
            result["order_by"] = [str(term) for term in self.order_by]
        if self.limit is not None:
            result["limit"] = self.limit
        if self.field_mask:
            result["field_mask"] = list(self.field_mask)
        if self.active_only:
            result["active_only"] = True
        return result
