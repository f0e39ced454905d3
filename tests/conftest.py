"""Pytest configuration and fixtures for all tests."""
import sqlite3

import pytest

from db import Database
import gossip_config
import schema
import store


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset all global state before each test to ensure test isolation."""
    gossip_config.reset_gossip_config()
    store.set_batch_mode(False)
    yield
    gossip_config.reset_gossip_config()
    store.set_batch_mode(False)


@pytest.fixture
def db():
    """Create in-memory database for testing."""
    conn = sqlite3.Connection(":memory:")
    db = Database(conn)
    schema.create_all(db)
    return db


@pytest.fixture
def make_store():
    """Factory for op stores, each with its own in-memory database."""
    def _make(topo):
        conn = sqlite3.Connection(":memory:")
        db = Database(conn)
        schema.create_all(db)
        return store.OpStore(db, topo)
    return _make
