"""Tests for StructuredQuery and OrderBy."""

from __future__ import annotations

import dataclasses

import pytest

from kvquery_specifications import (
    AttributeSpecification,
    Direction,
    OrderBy,
    StructuredQuery,
)


def _name_eq(val: str, registry) -> AttributeSpecification:
    return AttributeSpecification("name", "=", val, registry=registry)


# -- OrderBy ----------------------------------------------------------------


def test_order_by_parse_plain_field():
    term = OrderBy.parse("name")
    assert term == OrderBy("name", Direction.ASC)
    assert term.descending is False


def test_order_by_parse_descending_shorthand():
    term = OrderBy.parse("-created_at")
    assert term == OrderBy("created_at", Direction.DESC)
    assert term.descending is True


def test_order_by_parse_tuple():
    assert OrderBy.parse(("age", "DESC")) == OrderBy("age", Direction.DESC)
    assert OrderBy.parse(("age", "asc")) == OrderBy("age")


def test_order_by_parse_passes_instances_through():
    term = OrderBy("age")
    assert OrderBy.parse(term) is term


def test_order_by_str():
    assert str(OrderBy("age", Direction.DESC)) == "-age"
    assert str(OrderBy("age")) == "age"


# -- Construction -----------------------------------------------------------


def test_default_query():
    query = StructuredQuery("User")
    assert query.specification is None
    assert query.order_by == []
    assert query.limit is None
    assert query.field_mask == []
    assert query.active_only is False


def test_order_by_normalised_on_construction():
    query = StructuredQuery("User", order_by=["-created_at", ("name", "asc")])
    assert query.order_by == [
        OrderBy("created_at", Direction.DESC),
        OrderBy("name"),
    ]


def test_with_specification(registry):
    spec = _name_eq("Alice", registry)
    query = StructuredQuery("User", limit=3).with_specification(spec)
    assert query.specification is spec
    assert query.limit == 3  # unchanged


def test_with_limit():
    query = StructuredQuery("User").with_limit(10)
    assert query.limit == 10


def test_with_ordering():
    query = StructuredQuery("User").with_ordering("-created_at", "name")
    assert [str(term) for term in query.order_by] == ["-created_at", "name"]


def test_with_field_mask():
    query = StructuredQuery("User").with_field_mask("name", "address.city")
    assert query.field_mask == ["name", "address.city"]


# -- Serialisation -----------------------------------------------------------


def test_to_dict_minimal():
    assert StructuredQuery("User").to_dict() == {"kind": "User"}


def test_to_dict_full(registry):
    query = StructuredQuery(
        "User",
        specification=_name_eq("Alice", registry),
        order_by=["-age"],
        limit=10,
        field_mask=["name"],
        active_only=True,
    )
    d = query.to_dict()
    assert d["kind"] == "User"
    assert d["limit"] == 10
    assert d["order_by"] == ["-age"]
    assert d["field_mask"] == ["name"]
    assert d["active_only"] is True
    assert d["specification"] == {"op": "=", "attr": "name", "val": "Alice"}


# -- Immutability ------------------------------------------------------------


def test_frozen():
    query = StructuredQuery("User", limit=5)
    with pytest.raises(dataclasses.FrozenInstanceError):
        query.limit = 10  # type: ignore[misc]
