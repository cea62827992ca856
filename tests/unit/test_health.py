"""Unit tests for health endpoint

Verifies the service reports its own state and the database connection.
"""

import pytest


@pytest.mark.unit
class TestHealthCheck:
    """Test health check endpoint"""

    def test_health_returns_healthy(self, client):
        """Happy path: health check reports a connected database"""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_connected"] is True
        assert data["service"] == "pdf-service"
        assert data["active_extractions"] == 0

    def test_health_needs_no_token(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_root_reports_running(self, client):
        response = client.get("/")
        assert response.json()["status"] == "running"

    def test_unknown_route_returns_json_404(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}
