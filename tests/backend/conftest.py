"""
Backend-specific test fixtures.

These fixtures extend the global fixtures with store doubles that fail in
controlled ways, for exercising the error paths of routes and services.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# Failing Store Fixtures
# =============================================================================

@pytest.fixture
def failing_collection():
    """
    A collection double whose calls can be configured to raise.

    All store methods are AsyncMock, so tests set `side_effect`:

        failing_collection.find_one.side_effect = ServerSelectionTimeoutError("down")
    """
    collection = MagicMock()
    collection.name = "orders"
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.find_one_and_delete = AsyncMock()
    collection.delete_many = AsyncMock()
    collection.count_documents = AsyncMock()
    return collection


@pytest.fixture
def failing_db(failing_collection):
    """Database double that hands out `failing_collection` for any name."""
    db = MagicMock()
    db.__getitem__.return_value = failing_collection
    return db


@pytest.fixture
def failing_client(app, failing_db) -> TestClient:
    """
    TestClient whose database dependency is the failing double.

    Server exceptions are turned into responses so the catch-all handler
    can be asserted on.
    """
    from gateway.dependencies.store import get_database

    app.dependency_overrides[get_database] = lambda: failing_db
    return TestClient(app, raise_server_exceptions=False)
