"""Declarative description of what the backing store's native queries allow."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from kvquery_specifications.ast import AttributeSpecification
from kvquery_specifications.operators import INEQUALITY_OPERATORS, SpecificationOperator

from .exceptions import TranslationError

_COMPARISON_OPERATORS = frozenset(
    {
        SpecificationOperator.EQ,
        SpecificationOperator.LT,
        SpecificationOperator.LE,
        SpecificationOperator.GT,
        SpecificationOperator.GE,
    }
)


class StoreCapabilities(BaseModel):
    """Shape restrictions of a native query.

    Native queries are conjunctions only. Within one conjunction the store
    accepts ``supported_operators`` and range filters on at most
    ``max_inequality_properties`` distinct properties. A predicate is
    split into at most ``max_branches`` native queries (``None`` lifts the
    limit).
    """

    model_config = ConfigDict(frozen=True)

    supported_operators: frozenset[SpecificationOperator] = _COMPARISON_OPERATORS
    max_inequality_properties: int | None = Field(default=1, ge=1)
    max_branches: int | None = Field(default=30, ge=1)

    def check_condition(self, condition: AttributeSpecification) -> None:
        if condition.op not in self.supported_operators:
            raise TranslationError(
                f"Operator '{condition.op.value}' on '{condition.attr}' "
                f"is not supported by native queries"
            )

    def check_conjunction(self, conditions: Sequence[AttributeSpecification]) -> None:
        for condition in conditions:
            self.check_condition(condition)
        if self.max_inequality_properties is None:
            return
        ranged = list(
            dict.fromkeys(c.attr for c in conditions if c.op in INEQUALITY_OPERATORS)
        )
        if len(ranged) > self.max_inequality_properties:
            raise TranslationError(
                f"Inequality filters on {len(ranged)} properties {ranged} "
                f"in one query; at most {self.max_inequality_properties} allowed"
            )

    def check_branch_count(self, count: int) -> None:
        if self.max_branches is not None and count > self.max_branches:
            raise TranslationError(
                f"Predicate expands to {count} native queries; "
                f"at most {self.max_branches} allowed"
            )
