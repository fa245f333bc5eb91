"""Tests for structural keys."""

from __future__ import annotations

import pytest

from kvquery_datastore import Key, kind_of


def test_keys_compare_structurally():
    assert Key("User", 1, Key("Org", "o")) == Key("User", 1, Key("Org", "o"))
    assert len({Key("User", 1), Key("User", 1), Key("User", "1")}) == 2


def test_namespace_is_part_of_identity():
    assert Key("User", 1, namespace="a") != Key("User", 1, namespace="b")


def test_path_and_str():
    key = Key("Task", 7, Key("Project", "p1"))
    assert key.path == (("Project", "p1"), ("Task", 7))
    assert str(key) == "Project:p1/Task:7"


def test_descendants():
    project = Key("Project", "p1")
    task = Key("Task", 7, project)

    assert task.is_descendant_of(project)
    assert task.is_descendant_of(task)
    assert not project.is_descendant_of(task)
    assert not task.is_descendant_of(Key("Project", "p2"))
    assert not task.is_descendant_of(Key("Project", "p1", namespace="other"))


def test_integer_ids_sort_before_string_ids():
    keys = [Key("A", "b"), Key("A", 10), Key("A", "a"), Key("A", 2)]
    assert [k.id for k in sorted(keys, key=Key.sort_key)] == [2, 10, "a", "b"]


def test_kind_of():
    class Invoice:
        pass

    assert kind_of(Invoice) == "Invoice"
    assert kind_of("Order") == "Order"
    with pytest.raises(ValueError):
        kind_of("")
