"""Shared pytest fixtures for querycraft unit tests."""
from __future__ import annotations

import pytest

from querycraft.model.container import TableContainer
from querycraft.model.snapshot import SchemaSnapshot
from querycraft.query import Query
from tests.fixtures import RecordingListener, load_schema_snapshot


@pytest.fixture(scope="session")
def snapshot() -> SchemaSnapshot:
    """Canonical table metadata shared across all tests."""
    return load_schema_snapshot()


@pytest.fixture
def query() -> Query:
    return Query(name="test query")


@pytest.fixture
def customer(snapshot: SchemaSnapshot) -> TableContainer:
    return TableContainer.from_snapshot(snapshot, "customer")


@pytest.fixture
def orders(snapshot: SchemaSnapshot) -> TableContainer:
    return TableContainer.from_snapshot(snapshot, "orders")


@pytest.fixture
def order_line(snapshot: SchemaSnapshot) -> TableContainer:
    return TableContainer.from_snapshot(snapshot, "order_line")


@pytest.fixture
def product(snapshot: SchemaSnapshot) -> TableContainer:
    return TableContainer.from_snapshot(snapshot, "product")


@pytest.fixture
def recorder(query: Query) -> RecordingListener:
    listener = RecordingListener("recorder")
    query.add_query_change_listener(listener)
    return listener
