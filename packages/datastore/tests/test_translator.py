"""Tests for predicate translation into native-query branches."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError as SettingsError

from kvquery_datastore import Branch, PredicateTranslator, StoreCapabilities
from kvquery_datastore.exceptions import TranslationError
from kvquery_specifications import (
    AndSpecification,
    NotSpecification,
    OrSpecification,
    SpecificationOperator,
)
from kvquery_specifications.exceptions import ValidationError


@pytest.fixture
def translator() -> PredicateTranslator:
    return PredicateTranslator()


@pytest.fixture
def a(where):
    return where("a", "=", 1)


@pytest.fixture
def b(where):
    return where("b", "=", 2)


@pytest.fixture
def c(where):
    return where("c", "=", 3)


@pytest.fixture
def d(where):
    return where("d", "=", 4)


@pytest.fixture
def e(where):
    return where("e", "=", 5)


def conditions(branches: list[Branch]) -> list[list[Any]]:
    return [list(branch) for branch in branches]


# -- Match-all ---------------------------------------------------------------


def test_no_predicate_is_one_unfiltered_branch(translator: PredicateTranslator):
    branches = translator.translate(None)
    assert branches == [Branch()]
    assert branches[0].matches_all
    assert branches[0].to_specification() is None


def test_empty_and_is_one_unfiltered_branch(translator: PredicateTranslator):
    assert translator.translate(AndSpecification()) == [Branch()]


# -- OR-free -----------------------------------------------------------------


def test_single_condition(translator: PredicateTranslator, a):
    assert conditions(translator.translate(a)) == [[a]]


def test_conjunction_is_one_branch_in_source_order(translator, a, b, c):
    assert conditions(translator.translate(AndSpecification(c, a, b))) == [[c, a, b]]


def test_nested_conjunctions_flatten(translator, a, b, c):
    spec = AndSpecification(a, AndSpecification(b, c))
    assert conditions(translator.translate(spec)) == [[a, b, c]]


def test_repeated_condition_kept_once(translator, a, b):
    spec = AndSpecification(a, b, a)
    assert conditions(translator.translate(spec)) == [[a, b]]



def test_conditions_differing_only_in_value_type_are_all_kept(translator, where):
    one, true, real = where("x", "=", 1), where("x", "=", True), where("x", "=", 1.0)
    spec = AndSpecification(one, true, real)
    assert conditions(translator.translate(spec)) == [[one, true, real]]

# -- Disjunctions ------------------------------------------------------------


def test_top_level_or_yields_branch_per_operand(translator, a, b, c):
    spec = OrSpecification(a, b, c)
    assert conditions(translator.translate(spec)) == [[a], [b], [c]]


def test_or_distributed_over_shared_constraints(translator, a, b, c):
    spec = AndSpecification(a, OrSpecification(b, c))
    assert conditions(translator.translate(spec)) == [[a, b], [a, c]]


def test_shared_constraints_after_or_keep_position(translator, a, b, c):
    spec = AndSpecification(OrSpecification(b, c), a)
    assert conditions(translator.translate(spec)) == [[b, a], [c, a]]


def test_cartesian_product_in_traversal_order(translator, a, b, c, d, e):
    spec = AndSpecification(a, OrSpecification(b, c), OrSpecification(d, e))
    assert conditions(translator.translate(spec)) == [
        [a, b, d],
        [a, b, e],
        [a, c, d],
        [a, c, e],
    ]


def test_or_of_conjunctions(translator, a, b, c):
    spec = OrSpecification(AndSpecification(a, b), c)
    assert conditions(translator.translate(spec)) == [[a, b], [c]]


def test_nested_or_flattens(translator, a, b, c):
    spec = OrSpecification(a, OrSpecification(b, c))
    assert conditions(translator.translate(spec)) == [[a], [b], [c]]


def test_identical_operands_are_separate_branches(translator, a):
    assert len(translator.translate(OrSpecification(a, a))) == 2


def test_branch_as_specification(translator, a, b):
    single, double = translator.translate(OrSpecification(a, AndSpecification(a, b)))
    assert single.to_specification() == a
    assert double.to_specification() == AndSpecification(a, b)


# -- Empty disjunctions ------------------------------------------------------


def test_empty_or_is_rejected(translator: PredicateTranslator):
    with pytest.raises(ValidationError, match="no native query"):
        translator.translate(OrSpecification())


def test_empty_or_inside_and_is_rejected(translator, a):
    with pytest.raises(ValidationError):
        translator.translate(AndSpecification(a, OrSpecification()))


def test_empty_or_operand_contributes_nothing(translator, a):
    spec = OrSpecification(a, OrSpecification())
    assert conditions(translator.translate(spec)) == [[a]]


# -- Store restrictions ------------------------------------------------------


def test_negation_is_rejected(translator, a):
    with pytest.raises(TranslationError, match="Negation"):
        translator.translate(NotSpecification(a))


def test_nested_negation_is_rejected(translator, a, b):
    with pytest.raises(TranslationError):
        translator.translate(AndSpecification(a, OrSpecification(b, NotSpecification(a))))


def test_unknown_specification_type_is_rejected(translator):
    class Custom:
        def is_satisfied_by(self, candidate: Any) -> bool:
            return True

        def to_dict(self) -> dict[str, Any]:
            return {}

    with pytest.raises(TranslationError, match="Custom"):
        translator.translate(Custom())


def test_inequality_on_two_properties_is_rejected(translator, where):
    spec = AndSpecification(where("age", ">=", 18), where("score", "<", 5))
    with pytest.raises(TranslationError, match="age"):
        translator.translate(spec)


def test_range_on_one_property_is_accepted(translator, where):
    spec = AndSpecification(where("age", ">=", 18), where("age", "<", 65), where("x", "=", 1))
    assert len(translator.translate(spec)) == 1


def test_inequalities_in_separate_branches_are_accepted(translator, where):
    spec = OrSpecification(where("age", ">=", 18), where("score", "<", 5))
    assert len(translator.translate(spec)) == 2


def test_inequalities_merged_by_distribution_are_rejected(translator, where):
    spec = AndSpecification(
        where("age", ">=", 18),
        OrSpecification(where("status", "=", "A"), where("score", "<", 5)),
    )
    with pytest.raises(TranslationError):
        translator.translate(spec)


def test_branch_limit(a, b, c, d):
    translator = PredicateTranslator(StoreCapabilities(max_branches=3))
    spec = AndSpecification(OrSpecification(a, b), OrSpecification(c, d))
    with pytest.raises(TranslationError, match="at most 3"):
        translator.translate(spec)


def test_default_branch_limit_stops_explosion(where):
    translator = PredicateTranslator()
    groups = [
        OrSpecification(where(f"p{i}", "=", 0), where(f"p{i}", "=", 1)) for i in range(6)
    ]
    # 2 ** 6 = 64 branches
    with pytest.raises(TranslationError):
        translator.translate(AndSpecification(*groups))


def test_unsupported_operator(where):
    capabilities = StoreCapabilities(supported_operators=frozenset({SpecificationOperator.EQ}))
    translator = PredicateTranslator(capabilities)
    with pytest.raises(TranslationError, match="not supported"):
        translator.translate(where("age", ">", 1))


def test_unlimited_inequality_properties(where):
    translator = PredicateTranslator(StoreCapabilities(max_inequality_properties=None))
    spec = AndSpecification(where("age", ">=", 18), where("score", "<", 5))
    assert len(translator.translate(spec)) == 1


# -- StoreCapabilities -------------------------------------------------------


def test_capabilities_defaults():
    capabilities = StoreCapabilities()
    assert capabilities.max_inequality_properties == 1
    assert capabilities.max_branches == 30
    assert SpecificationOperator.EQ in capabilities.supported_operators


def test_capabilities_are_validated():
    with pytest.raises(SettingsError):
        StoreCapabilities(max_branches=0)


def test_capabilities_check_conjunction_directly(where):
    capabilities = StoreCapabilities()
    capabilities.check_conjunction([where("a", ">", 1), where("a", "<", 5)])
    with pytest.raises(TranslationError):
        capabilities.check_conjunction([where("a", ">", 1), where("b", "<", 5)])
