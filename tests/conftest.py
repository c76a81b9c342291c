"""
Global test fixtures for Lunele Gateway.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Test settings and the FastAPI app wired to the mock database
- Basic-auth headers
- A notifier that records calls
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from gateway.config import Settings  # noqa: E402
from gateway.core.security import encode_basic_authorization  # noqa: E402


TEST_USERNAME = "baker"
TEST_PASSWORD = "s3cret-fl0ur"


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings for a gateway with three collections."""
    return Settings(
        mongo_uri="mongodb://test:27017",
        mongo_db_name="test_db",
        basic_auth_username=TEST_USERNAME,
        basic_auth_password=TEST_PASSWORD,
        collections=["orders", "custom_orders", "products"],
        notify_collections=["orders"],
        store_timeout_seconds=5,
    )


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest.fixture
def mock_db(mock_async_mongo_client):
    """Provide the mock application database."""
    return mock_async_mongo_client["test_db"]


# =============================================================================
# Notifier Fixtures
# =============================================================================

class RecordingNotifier:
    """Notifier that keeps every call for assertions."""

    def __init__(self):
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def notify_created(self, collection: str, document: dict[str, Any]) -> None:
        self.calls.append((collection, document))


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    return RecordingNotifier()


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app(settings, mock_db, recording_notifier):
    """
    Create the FastAPI app for testing.

    The database dependency is overridden with the mock database, so the
    lifespan (which would connect to a real server) is never needed.
    """
    from gateway.dependencies.store import get_database
    from gateway.main import create_app

    application = create_app(settings)
    application.dependency_overrides[get_database] = lambda: mock_db
    application.state.notifier = recording_notifier
    return application


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Not used as a context manager so the lifespan does not run.
    """
    yield TestClient(app)


@pytest.fixture
def auth_headers() -> dict:
    """Valid Basic-auth headers for the test credential."""
    return {"Authorization": encode_basic_authorization(TEST_USERNAME, TEST_PASSWORD)}


@pytest.fixture
def create_documents(client, auth_headers):
    """
    Helper to create several documents through the API.

    Usage:
        def test_something(create_documents):
            docs = create_documents("orders", [{"item": "cake"}, {"item": "pie"}])
    """
    def _create(path: str, bodies: list[dict]) -> list[dict]:
        created = []
        for body in bodies:
            response = client.post(f"/api/{path}", json=body, headers=auth_headers)
            assert response.status_code == 201, response.text
            created.append(response.json()["data"])
        return created

    return _create


@pytest.fixture
def count_documents(client, auth_headers):
    """Count the documents behind an /api path using the list endpoint."""
    def _count(path: str) -> int:
        response = client.get(f"/api/{path}?limit=1", headers=auth_headers)
        assert response.status_code == 200, response.text
        return response.json()["pagination"]["total"]

    return _count


# =============================================================================
# Utility Fixtures
# =============================================================================

@pytest.fixture
def parse_timestamp():
    """Parse the `...Z` timestamps the API returns."""
    def _parse(value: str) -> datetime:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return _parse


@pytest.fixture
def assert_datetime_recent(parse_timestamp):
    """
    Fixture providing a helper to assert a datetime is recent.

    Usage:
        def test_something(assert_datetime_recent):
            assert_datetime_recent(response["createdAt"], max_age_seconds=60)
    """
    def _assert_recent(datetime_str: str, max_age_seconds: int = 60):
        dt = parse_timestamp(datetime_str)
        now = datetime.now(timezone.utc)
        age = (now - dt).total_seconds()

        assert age < max_age_seconds, f"Datetime {datetime_str} is {age}s old, expected < {max_age_seconds}s"
        assert age >= -1, f"Datetime {datetime_str} is in the future"

    return _assert_recent
