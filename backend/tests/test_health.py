"""
Tests for the health check endpoint.
"""

from sqlalchemy.exc import OperationalError

from rest_api.main import API_VERSION, app
from shared.infrastructure.db import get_db


class BrokenSession:
    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestHealthEndpoints:
    """Test health check API endpoints."""

    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok", "version": API_VERSION}

    def test_health_check_needs_no_principal(self, client):
        assert client.get("/api/health").status_code == 200

    def test_health_check_reports_database_failure(self, client):
        app.dependency_overrides[get_db] = lambda: BrokenSession()
        response = client.get("/api/health")
        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "error"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
