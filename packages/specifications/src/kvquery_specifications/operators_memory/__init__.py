"""
In-memory operator implementations.

Provides concrete MemoryOperator subclasses for each comparison
SpecificationOperator and a factory function to create registries.

Usage::

    from kvquery_specifications.operators_memory import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(SpecificationOperator.EQ, actual, expected)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Returns a fresh instance on each call, for dependency injection.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(SpecificationOperator.EQ, "active", "active")
        True
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        EqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
    )
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
