"""Tests for field masks over record state."""

from __future__ import annotations

from kvquery_core import EntityRecord
from kvquery_datastore import FieldMaskApplier, mask_state

STATE = {
    "name": "Ann",
    "age": 33,
    "address": {"city": "Oslo", "zip": "0150", "geo": {"lat": 59.9, "lng": 10.7}},
    "tags": ["a", "b"],
}


def test_empty_mask_keeps_everything():
    assert mask_state(STATE, []) == STATE


def test_empty_mask_returns_a_copy():
    masked = mask_state(STATE, [])
    masked["address"]["city"] = "Bergen"
    assert STATE["address"]["city"] == "Oslo"


def test_top_level_fields():
    assert mask_state(STATE, ["name", "tags"]) == {"name": "Ann", "tags": ["a", "b"]}


def test_nested_path_keeps_enclosing_structure():
    assert mask_state(STATE, ["address.geo.lat"]) == {"address": {"geo": {"lat": 59.9}}}


def test_sibling_paths_share_parent():
    assert mask_state(STATE, ["address.city", "address.zip"]) == {
        "address": {"city": "Oslo", "zip": "0150"}
    }


def test_parent_path_wins_over_child():
    assert mask_state(STATE, ["address", "address.city"]) == {"address": STATE["address"]}


def test_child_before_parent_still_keeps_whole_parent():
    assert mask_state(STATE, ["address.city", "address"]) == {"address": STATE["address"]}


def test_missing_paths_are_ignored():
    assert mask_state(STATE, ["nope", "name.first", "address.street"]) == {}


def test_masked_values_are_copies():
    masked = mask_state(STATE, ["tags"])
    masked["tags"].append("c")
    assert STATE["tags"] == ["a", "b"]


def test_applier_masks_state_only():
    record = EntityRecord(id=7, state=STATE, version=3, deleted=True)
    masked = FieldMaskApplier(["name"]).apply(record)
    assert masked == EntityRecord(id=7, state={"name": "Ann"}, version=3, deleted=True)


def test_applier_without_paths_returns_record_unchanged():
    record = EntityRecord(id=7, state=STATE)
    assert FieldMaskApplier().apply(record) is record
