"""Predicate translation: arbitrary AND/OR trees to AND-only branches."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from kvquery_specifications.ast import AttributeSpecification
from kvquery_specifications.base import (
    AndSpecification,
    NotSpecification,
    OrSpecification,
)
from kvquery_specifications.exceptions import ValidationError

from .capabilities import StoreCapabilities
from .exceptions import TranslationError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from kvquery_core.domain.specification import ISpecification

logger = logging.getLogger("kvquery.datastore.translator")

_Conjunction = list[AttributeSpecification[Any]]


@dataclass(frozen=True)
class Branch:
    """One OR-free conjunction of conditions, in source traversal order.

    A branch without conditions matches every record of the kind.
    """

    conditions: tuple[AttributeSpecification[Any], ...] = ()

    @property
    def matches_all(self) -> bool:
        return not self.conditions

    def to_specification(self) -> ISpecification[Any] | None:
        """The branch as an in-memory specification (``None`` = match all)."""
        if not self.conditions:
            return None
        if len(self.conditions) == 1:
            return self.conditions[0]
        return AndSpecification(*self.conditions)

    def __iter__(self) -> Iterator[AttributeSpecification[Any]]:
        return iter(self.conditions)

    def __len__(self) -> int:
        return len(self.conditions)


class PredicateTranslator:
    """
    Rewrites a specification tree into disjunctive normal form.

    Each disjunct becomes a :class:`Branch` the store can run natively.
    ORs nested inside ANDs are distributed over their siblings, so
    ``a AND (b OR c)`` yields ``[a AND b, a AND c]``. Branch order follows
    the source tree left to right. Every branch is checked against the
    :class:`StoreCapabilities` before it is returned, so a predicate the
    store cannot express fails here, before any read.
    """

    def __init__(self, capabilities: StoreCapabilities | None = None) -> None:
        self.capabilities = capabilities or StoreCapabilities()

    def translate(self, spec: ISpecification[Any] | None) -> list[Branch]:
        if spec is None:
            return [Branch()]

        disjuncts = self._distribute(spec)
        if not disjuncts:
            raise ValidationError(
                "Predicate yields no native query: an OR without operands "
                "matches nothing"
            )
        self.capabilities.check_branch_count(len(disjuncts))

        branches = []
        for conjunction in disjuncts:
            conditions = _unique(conjunction)
            self.capabilities.check_conjunction(conditions)
            branches.append(Branch(tuple(conditions)))

        logger.debug("Translated %r into %d branch(es)", spec, len(branches))
        return branches

    def _distribute(self, spec: ISpecification[Any]) -> list[_Conjunction]:
        if isinstance(spec, AttributeSpecification):
            self.capabilities.check_condition(spec)
            return [[spec]]

        if isinstance(spec, AndSpecification):
            product: list[_Conjunction] = [[]]
            for child in spec.specifications:
                child_disjuncts = self._distribute(child)
                product = [
                    left + right for left in product for right in child_disjuncts
                ]
                # Guard the cartesian product before it grows any further
                self.capabilities.check_branch_count(len(product))
            return product

        if isinstance(spec, OrSpecification):
            disjuncts: list[_Conjunction] = []
            for child in spec.specifications:
                disjuncts.extend(self._distribute(child))
                self.capabilities.check_branch_count(len(disjuncts))
            return disjuncts

        if isinstance(spec, NotSpecification):
            raise TranslationError(
                f"Negation cannot be expressed in a native query: {spec!r}"
            )

        raise TranslationError(
            f"Unsupported specification type: {type(spec).__name__}"
        )


def _unique(conjunction: _Conjunction) -> _Conjunction:
    """Drop repeated conditions, keeping the first occurrence."""
    unique: _Conjunction = []
    for condition in conjunction:
        if condition not in unique:
            unique.append(condition)
    return unique
