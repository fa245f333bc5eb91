"""Shared fixtures for datastore tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from kvquery_core import EntityRecord
from kvquery_datastore import (
    DatastoreWrapper,
    EntityRecordMapper,
    FlatLayout,
    InMemoryDatastore,
    RecordLayout,
)
from kvquery_specifications import AttributeSpecification
from kvquery_specifications.operators_memory import build_default_registry

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def registry():
    """Default in-memory operator registry for building specs."""
    return build_default_registry()


@pytest.fixture
def where(registry):
    """Shorthand for a single-condition specification."""

    def make(attr: str, op: str, val: Any) -> AttributeSpecification:
        return AttributeSpecification(attr, op, val, registry=registry)

    return make


@pytest.fixture
def store() -> InMemoryDatastore:
    return InMemoryDatastore()


@pytest.fixture
def wrapper(store: InMemoryDatastore) -> DatastoreWrapper:
    return DatastoreWrapper(store)


@pytest.fixture
def mapper() -> EntityRecordMapper:
    return EntityRecordMapper()


@pytest.fixture
def layout() -> FlatLayout:
    return FlatLayout("User")


@pytest.fixture
def seed(store: InMemoryDatastore, mapper: EntityRecordMapper, layout: FlatLayout):
    """Store records through the mapper; returns the records."""

    def put(
        records: list[EntityRecord], record_layout: RecordLayout | None = None
    ) -> list[EntityRecord]:
        target = record_layout or layout
        for record in records:
            store.put(mapper.to_entity(record, target.key_of(record.id, store)))
        return records

    return put


def _users(count: int, *, status: str, age: int = 30, start: int = 0) -> list[EntityRecord]:
    return [
        EntityRecord(
            id=f"u{start + i:03d}",
            state={
                "name": f"user {start + i}",
                "age": age,
                "status": status,
                "created_at": EPOCH + timedelta(minutes=start + i),
            },
        )
        for i in range(count)
    ]


@pytest.fixture
def make_users():
    """``count`` users with ids ``u<start>..``, created one minute apart."""
    return _users


@pytest.fixture
def numbered(seed) -> list[EntityRecord]:
    """Ten records ``n00..n09`` with ``n`` equal to their position."""
    return seed(
        [EntityRecord(id=f"n{i:02d}", state={"n": i}) for i in range(10)]
    )
