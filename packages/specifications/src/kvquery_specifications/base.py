from typing import Any, Generic, TypeVar

from kvquery_core.domain.specification import ISpecification

T = TypeVar("T", contravariant=True)


class BaseSpecification(Generic[T], ISpecification[T]):
    """Base class for specifications with logic operator support."""

    def __and__(self, other: ISpecification[T]) -> "AndSpecification[T]":
        return AndSpecification(self, other)

    def __or__(self, other: ISpecification[T]) -> "OrSpecification[T]":
        return OrSpecification(self, other)

    def __invert__(self) -> "NotSpecification[T]":
        return NotSpecification(self)

    def merge(self, other: ISpecification[T]) -> "AndSpecification[T]":
        """Merge with another specification using logical AND."""
        return AndSpecification(self, other)


class _CompositeSpecification(BaseSpecification[T]):
    op = ""

    def __init__(self, *specifications: ISpecification[T]) -> None:
        self.specifications = specifications

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op,
            "conditions": [spec.to_dict() for spec in self.specifications],
        }

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.specifications == other.specifications  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(repr(spec) for spec in self.specifications)
        return f"{self.op.upper()}({inner})"


class AndSpecification(_CompositeSpecification[T]):
    """Logical AND composite specification."""

    op = "and"

    def is_satisfied_by(self, candidate: T) -> bool:
        return all(spec.is_satisfied_by(candidate) for spec in self.specifications)


class OrSpecification(_CompositeSpecification[T]):
    """Logical OR composite specification."""

    op = "or"

    def is_satisfied_by(self, candidate: T) -> bool:
        return any(spec.is_satisfied_by(candidate) for spec in self.specifications)


class NotSpecification(BaseSpecification[T]):
    """Logical NOT composite specification.

    Evaluable in memory; the datastore translator rejects it because the
    store has no native negation.
    """

    def __init__(self, specification: ISpecification[T]) -> None:
        self.specification = specification

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.specification.is_satisfied_by(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": "not",
            "conditions": [self.specification.to_dict()],
        }

    def __repr__(self) -> str:
        return f"NOT({self.specification!r})"
