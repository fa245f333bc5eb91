"""Comparison operators: =, >, <, >=, <=.

Values of incomparable types never match, the same way the backing store
never matches a filter against a property of a different value type.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..operators import SpecificationOperator


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> SpecificationOperator:
        return SpecificationOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(field_value == condition_value)


class _OrderingOperator(MemoryOperator):
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        if field_value is None or condition_value is None:
            return False
        try:
            return bool(self._compare(field_value, condition_value))
        except TypeError:
            return False

    def _compare(self, field_value: Any, condition_value: Any) -> bool:
        raise NotImplementedError


class GreaterThanOperator(_OrderingOperator):
    @property
    def name(self) -> SpecificationOperator:
        return SpecificationOperator.GT

    def _compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value > condition_value


class LessThanOperator(_OrderingOperator):
    @property
    def name(self) -> SpecificationOperator:
        return SpecificationOperator.LT

    def _compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value < condition_value


class GreaterEqualOperator(_OrderingOperator):
    @property
    def name(self) -> SpecificationOperator:
        return SpecificationOperator.GE

    def _compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value >= condition_value


class LessEqualOperator(_OrderingOperator):
    @property
    def name(self) -> SpecificationOperator:
        return SpecificationOperator.LE

    def _compare(self, field_value: Any, condition_value: Any) -> bool:
        return field_value <= condition_value
