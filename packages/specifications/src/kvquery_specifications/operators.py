from enum import Enum


class SpecificationOperator(str, Enum):
    """Supported operators for specifications."""

    # Comparison
    EQ = "="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    # Logical operators
    AND = "and"
    OR = "or"
    NOT = "not"


#: Comparison operators that constrain a property to a range.
INEQUALITY_OPERATORS: frozenset[SpecificationOperator] = frozenset(
    {
        SpecificationOperator.GT,
        SpecificationOperator.LT,
        SpecificationOperator.GE,
        SpecificationOperator.LE,
    }
)
