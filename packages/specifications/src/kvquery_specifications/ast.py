from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from .base import (
    AndSpecification,
    BaseSpecification,
    NotSpecification,
    OrSpecification,
)
from .exceptions import OperatorNotFoundError, ValidationError
from .operators import SpecificationOperator
from .utils import cast_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kvquery_core.domain.specification import ISpecification

    from .evaluator import MemoryOperatorRegistry

T = TypeVar("T", contravariant=True)

# Pre-compute valid operator values for validation
_VALID_OPERATORS: frozenset[str] = frozenset(m.value for m in SpecificationOperator)
_LOGICAL_OPERATORS: frozenset[str] = frozenset(
    {SpecificationOperator.AND, SpecificationOperator.OR, SpecificationOperator.NOT}
)


def _typed(val: Any) -> Any:
    """Hashable form of *val* that keeps ``1``, ``1.0`` and ``True`` apart."""
    if isinstance(val, list | tuple):
        return tuple(_typed(item) for item in val)
    return (type(val), val)


class AttributeSpecification(BaseSpecification[T]):
    """
    Specification that compares a single attribute with a value.

    Delegates in-memory evaluation to a :class:`MemoryOperatorRegistry`
    (strategy pattern). The registry is injected explicitly.

    Two leaves are equal when attribute, operator and value are equal,
    which lets query decomposition compare and deduplicate conditions.
    """

    def __init__(
        self,
        attr: str,
        op: SpecificationOperator | str,
        val: Any,
        *,
        registry: MemoryOperatorRegistry,
    ) -> None:
        self.attr = attr
        self.op = SpecificationOperator(op) if isinstance(op, str) else op
        self.val = val
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() from operators_memory to create one."
            )
        self._registry = registry

    @property
    def registry(self) -> MemoryOperatorRegistry:
        return self._registry

    def is_satisfied_by(self, candidate: T) -> bool:
        actual_val = self._resolve_field(candidate, self.attr)
        return self._registry.evaluate(self.op, actual_val, self.val)

    # -- field resolution ----------------------------------------------------

    @staticmethod
    def _resolve_field(obj: Any, attr_path: str) -> Any:
        """
        Resolve a dot-separated attribute path on *obj*.

        Mappings (plain dicts, stored entities) are read by key, anything
        else by attribute. Lists are traversed implicitly: ``items.name``
        on a list returns ``[item.name for item in items]``.
        """
        for part in attr_path.split("."):
            if obj is None:
                return None
            if isinstance(obj, list | tuple):
                return [
                    AttributeSpecification._resolve_field(item, part) for item in obj
                ]
            obj = obj.get(part) if isinstance(obj, Mapping) else getattr(obj, part, None)
        return obj

    # -- value semantics -----------------------------------------------------

    def _identity(self) -> tuple[str, SpecificationOperator, Any]:
        return (self.attr, self.op, _typed(self.val))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AttributeSpecification):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return f"{self.attr} {self.op.value} {self.val!r}"

    # -- serialisation -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.op.value,
            "attr": self.attr,
            "val": self.val,
        }


class SpecificationFactory(Generic[T]):
    """
    Factory for creating specifications from dictionary / JSON representations.

    Supports:
    - ``from_dict(data)`` — parse a nested dict tree
    - ``from_json(text)`` — parse a JSON string
    - ``validate(data)``  — validate without constructing
    - ``value_type`` casting via :func:`cast_value`
    """

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def from_dict(
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ISpecification[T]:
        """
        Create a specification tree from a dictionary.

        Parameters
        ----------
        data:
            The specification dictionary (potentially nested).
        allowed_fields:
            Optional whitelist of valid attribute names.  If provided,
            any ``attr`` not in this list raises :class:`ValidationError`.
        registry:
            :class:`MemoryOperatorRegistry` injected into every
            :class:`AttributeSpecification` leaf.
        """
        SpecificationFactory._validate_node(data, allowed_fields=allowed_fields)
        return SpecificationFactory._build(data, registry=registry)

    @staticmethod
    def from_json(
        text: str,
        *,
        allowed_fields: Sequence[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ISpecification[T]:
        """Parse a JSON string and build a specification tree."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                f"Invalid JSON: {exc}",
                path="<root>",
            ) from exc

        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object",
                path="<root>",
            )

        return SpecificationFactory.from_dict(
            data,
            allowed_fields=allowed_fields,
            registry=registry,
        )

    @staticmethod
    def validate(
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Validate a specification dict and return a list of error messages.

        Returns an empty list when the structure is valid.
        """
        errors: list[str] = []
        SpecificationFactory._collect_errors(
            data, errors, path="<root>", allowed_fields=allowed_fields
        )
        return errors

    # ------------------------------------------------------------------ #
    # Internal: recursive build                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build(
        data: dict[str, Any],
        *,
        registry: MemoryOperatorRegistry,
    ) -> ISpecification[T]:
        op_str = data.get("op", "").lower()

        if op_str in (SpecificationOperator.AND, SpecificationOperator.OR):
            specs = tuple(
                SpecificationFactory._build(c, registry=registry)
                for c in data.get("conditions", [])
            )
            composite = (
                AndSpecification if op_str == SpecificationOperator.AND else OrSpecification
            )
            return composite(*cast("tuple[ISpecification[T], ...]", specs))
        if op_str == SpecificationOperator.NOT:
            conditions = data.get("conditions") or [data["condition"]]
            return NotSpecification(
                SpecificationFactory._build(conditions[0], registry=registry)
            )

        # Leaf node
        val = data.get("val")
        value_type = data.get("value_type")
        if value_type is not None:
            val = cast_value(val, value_type)

        return AttributeSpecification(data["attr"], op_str, val, registry=registry)

    # ------------------------------------------------------------------ #
    # Internal: validation                                               #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _children(data: dict[str, Any], path: str) -> list[tuple[str, Any]]:
        """Return ``(path, child)`` pairs of a logical node."""
        conditions = data.get("conditions")
        if conditions is not None:
            if not isinstance(conditions, list):
                raise ValidationError("'conditions' must be a list", path=path)
            return [(f"{path}.conditions[{i}]", c) for i, c in enumerate(conditions)]
        if "condition" in data:
            return [(f"{path}.condition", data["condition"])]
        raise ValidationError(
            f"Logical operator '{data.get('op')}' requires 'conditions' list",
            path=path,
        )

    @staticmethod
    def _validate_leaf_node(
        data: dict[str, Any],
        op_lower: str,
        path: str,
        allowed_fields: Sequence[str] | None,
    ) -> None:
        if op_lower not in _VALID_OPERATORS:
            raise OperatorNotFoundError(
                op_lower,
                [m.value for m in SpecificationOperator],
            )

        attr = data.get("attr")
        if not attr or not isinstance(attr, str):
            raise ValidationError(
                f"Leaf specification missing 'attr': {data}",
                path=path,
            )

        if allowed_fields is not None and attr not in allowed_fields:
            raise ValidationError(
                f"Field '{attr}' is not in the allowed fields list",
                path=path,
            )

    @staticmethod
    def _validate_node(
        data: dict[str, Any],
        *,
        path: str = "<root>",
        allowed_fields: Sequence[str] | None = None,
    ) -> None:
        """Raise on first validation error (fail-fast)."""
        if not isinstance(data, dict):
            raise ValidationError(
                f"Expected a dict, got {type(data).__name__}",
                path=path,
            )

        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            raise ValidationError("Missing or empty 'op' key", path=path)

        op_lower = op_str.lower()
        if op_lower not in _LOGICAL_OPERATORS:
            SpecificationFactory._validate_leaf_node(
                data, op_lower, path, allowed_fields
            )
            return

        children = SpecificationFactory._children(data, path)
        if op_lower == SpecificationOperator.NOT and len(children) != 1:
            raise ValidationError("'not' requires exactly one condition", path=path)
        for child_path, child in children:
            SpecificationFactory._validate_node(
                child, path=child_path, allowed_fields=allowed_fields
            )

    @staticmethod
    def _collect_errors(
        data: Any,
        errors: list[str],
        *,
        path: str,
        allowed_fields: Sequence[str] | None = None,
    ) -> None:
        """Recursive error collection (non-throwing)."""
        if not isinstance(data, dict):
            errors.append(f"{path}: expected dict, got {type(data).__name__}")
            return

        op_str = data.get("op")
        if not op_str or not isinstance(op_str, str):
            errors.append(f"{path}: missing or empty 'op' key")
            return

        op_lower = op_str.lower()
        if op_lower in _LOGICAL_OPERATORS:
            try:
                children = SpecificationFactory._children(data, path)
            except ValidationError as exc:
                errors.append(f"{path}: {exc.message}")
                return
            for child_path, child in children:
                SpecificationFactory._collect_errors(
                    child, errors, path=child_path, allowed_fields=allowed_fields
                )
            return

        if op_lower not in _VALID_OPERATORS:
            errors.append(f"{path}: unknown operator '{op_lower}'")

        attr = data.get("attr")
        if not attr or not isinstance(attr, str):
            errors.append(f"{path}: missing 'attr'")
            return

        if allowed_fields is not None and attr not in allowed_fields:
            errors.append(f"{path}: field '{attr}' not allowed")
