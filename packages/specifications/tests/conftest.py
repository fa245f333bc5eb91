"""Shared fixtures for specifications tests."""

from __future__ import annotations

import pytest

from kvquery_specifications.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry for building specs."""
    return build_default_registry()


@pytest.fixture
def alice() -> dict:
    return {"name": "Alice", "age": 28, "status": "ACTIVE"}


@pytest.fixture
def bob() -> dict:
    return {"name": "Bob", "age": 45, "status": "PENDING"}
