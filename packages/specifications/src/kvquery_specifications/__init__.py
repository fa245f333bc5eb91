from .ast import AttributeSpecification, SpecificationFactory
from .base import (
    AndSpecification,
    BaseSpecification,
    NotSpecification,
    OrSpecification,
)
from .builder import SpecificationBuilder
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    OperatorNotFoundError,
    SpecificationError,
    ValidationError,
)
from .operators import INEQUALITY_OPERATORS, SpecificationOperator
from .operators_memory import build_default_registry
from .structured_query import Direction, OrderBy, StructuredQuery
from .utils import cast_value

__all__ = [
    # Core types
    "SpecificationOperator",
    "INEQUALITY_OPERATORS",
    "AttributeSpecification",
    "SpecificationFactory",
    "BaseSpecification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    # Builder
    "SpecificationBuilder",
    # Queries
    "Direction",
    "OrderBy",
    "StructuredQuery",
    # Evaluator / strategy
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Exceptions
    "SpecificationError",
    "ValidationError",
    "OperatorNotFoundError",
    # Utilities
    "cast_value",
]
