"""
Tests for the global error handlers.

These tests verify:
- Unknown routes return the 404 envelope
- Store failures become a generic 500 without leaking detail
- Unexpected exceptions are caught by the catch-all handler
"""

from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError


class TestNotFoundRoutes:
    """Tests for unmatched routes."""

    def test_unknown_path_returns_endpoint_not_found(self, client):
        response = client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Endpoint not found"}

    def test_unknown_collection_returns_endpoint_not_found(self, client, auth_headers):
        response = client.get("/api/unicorns", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Endpoint not found"

    def test_wrong_method_keeps_envelope(self, client, auth_headers):
        response = client.post(f"/api/orders/{ObjectId()}", json={}, headers=auth_headers)

        assert response.status_code == 405
        assert response.json()["success"] is False


class TestStoreFailures:
    """Tests for store errors surfacing through the API."""

    def test_store_error_is_generic_500(self, failing_client, failing_collection, auth_headers):
        failing_collection.find_one.side_effect = ServerSelectionTimeoutError(
            "mongodb://secret-host:27017 unreachable"
        )

        response = failing_client.get(f"/api/orders/{ObjectId()}", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}
        assert "secret-host" not in response.text

    def test_unexpected_exception_is_generic_500(
        self, failing_client, failing_collection, auth_headers
    ):
        failing_collection.find_one_and_delete.side_effect = RuntimeError("boom")

        response = failing_client.delete(f"/api/orders/{ObjectId()}", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal server error"}

    def test_missing_database_is_500(self, app, auth_headers):
        from fastapi.testclient import TestClient

        from gateway.dependencies.store import get_database

        app.dependency_overrides.pop(get_database)
        response = TestClient(app).get("/api/orders", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
