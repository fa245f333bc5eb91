"""Tests for the SpecificationBuilder fluent API."""

from __future__ import annotations

import pytest

from kvquery_specifications import (
    AndSpecification,
    AttributeSpecification,
    NotSpecification,
    OrSpecification,
    SpecificationBuilder,
    SpecificationOperator,
)


@pytest.fixture
def builder(registry) -> SpecificationBuilder:
    return SpecificationBuilder(registry=registry)


# -- Single condition -------------------------------------------------------


def test_single_where(builder: SpecificationBuilder, alice: dict):
    spec = builder.where("name", "=", "Alice").build()
    assert isinstance(spec, AttributeSpecification)
    assert spec.is_satisfied_by(alice) is True


def test_single_where_enum_op(builder: SpecificationBuilder, alice: dict):
    spec = builder.where("age", SpecificationOperator.GE, 28).build()
    assert spec.is_satisfied_by(alice) is True


def test_default_registry_when_none_given(alice: dict):
    spec = SpecificationBuilder().where("age", "<", 30).build()
    assert spec.is_satisfied_by(alice) is True


# -- Implicit AND ------------------------------------------------------------


def test_multiple_where_implicit_and(builder: SpecificationBuilder, alice, bob):
    spec = builder.where("name", "=", "Alice").where("age", "<", 30).build()
    assert isinstance(spec, AndSpecification)
    assert spec.is_satisfied_by(alice) is True
    assert spec.is_satisfied_by(bob) is False


# -- Explicit groups ---------------------------------------------------------


def test_or_group(builder: SpecificationBuilder, alice, bob):
    spec = (
        builder.or_group()
        .where("name", "=", "Alice")
        .where("name", "=", "Bob")
        .end_group()
        .build()
    )
    assert isinstance(spec, OrSpecification)
    assert spec.is_satisfied_by(alice) is True
    assert spec.is_satisfied_by(bob) is True


def test_and_group(builder: SpecificationBuilder, alice, bob):
    spec = (
        builder.and_group()
        .where("status", "=", "ACTIVE")
        .where("age", "<", 35)
        .end_group()
        .build()
    )
    assert spec.is_satisfied_by(alice) is True
    assert spec.is_satisfied_by(bob) is False


def test_not_group(builder: SpecificationBuilder, alice: dict):
    spec = builder.not_group().where("status", "=", "PENDING").end_group().build()
    assert isinstance(spec, NotSpecification)
    assert spec.is_satisfied_by(alice) is True


def test_not_group_with_two_conditions_raises(builder: SpecificationBuilder):
    builder.not_group().where("a", "=", 1).where("b", "=", 2)
    with pytest.raises(ValueError, match="exactly one"):
        builder.end_group()


# -- Nesting -----------------------------------------------------------------


def test_nested_groups(builder: SpecificationBuilder, alice, bob):
    # (name = Alice AND age < 30)  OR  (status = PENDING)
    spec = (
        builder.or_group()
        .and_group()
        .where("name", "=", "Alice")
        .where("age", "<", 30)
        .end_group()
        .and_group()
        .where("status", "=", "PENDING")
        .end_group()
        .end_group()
        .build()
    )
    assert spec.is_satisfied_by(alice) is True
    assert spec.is_satisfied_by(bob) is True


def test_where_then_or_group_builds_and_of_or(builder: SpecificationBuilder):
    spec = (
        builder.where("age", ">=", 18)
        .or_group()
        .where("status", "=", "ACTIVE")
        .where("status", "=", "PENDING")
        .end_group()
        .build()
    )
    assert isinstance(spec, AndSpecification)
    first, second = spec.specifications
    assert isinstance(first, AttributeSpecification)
    assert isinstance(second, OrSpecification)


# -- .add() -----------------------------------------------------------------


def test_add_existing_spec(builder: SpecificationBuilder, alice: dict, registry):
    existing = AttributeSpecification(
        "age", SpecificationOperator.GT, 20, registry=registry
    )
    spec = builder.where("name", "=", "Alice").add(existing).build()
    assert isinstance(spec, AndSpecification)
    assert spec.is_satisfied_by(alice) is True


# -- .reset() ---------------------------------------------------------------


def test_reset(builder: SpecificationBuilder, alice: dict):
    builder.where("name", "=", "Bob")
    builder.reset()
    spec = builder.where("name", "=", "Alice").build()
    assert spec.is_satisfied_by(alice) is True


# -- Edge cases---------------------------------------------------------------


def test_build_empty_raises(builder: SpecificationBuilder):
    with pytest.raises(ValueError, match="No conditions"):
        builder.build()


def test_end_group_on_root_raises(builder: SpecificationBuilder):
    with pytest.raises(ValueError, match="No open group"):
        builder.end_group()


def test_build_with_unclosed_group_raises(builder: SpecificationBuilder):
    builder.or_group().where("name", "=", "Alice")
    with pytest.raises(ValueError, match="still open"):
        builder.build()


def test_empty_group_raises(builder: SpecificationBuilder):
    builder.or_group()
    with pytest.raises(ValueError, match="empty group"):
        builder.end_group()


# -- serialisation ------------------------------------------------------------


def test_to_dict(builder: SpecificationBuilder):
    spec = builder.where("name", "=", "Alice").where("age", ">", 20).build()
    d = spec.to_dict()
    assert d["op"] == "and"
    assert len(d["conditions"]) == 2
