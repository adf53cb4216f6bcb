"""
Tests for middleware and infrastructure components.
"""

import pytest
from unittest.mock import MagicMock, patch
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from rest_api.core.middlewares import (
    SecurityHeadersMiddleware,
    TrustedPrincipalHeadersMiddleware,
    register_middlewares,
)
from rest_api.services.permissions import Principal
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
    request_id_var,
)
from shared.infrastructure.db import get_db_context, safe_commit
from tests.conftest import principal_headers


# =============================================================================
# SecurityHeadersMiddleware Tests
# =============================================================================

class TestSecurityHeadersMiddleware:
    """Tests for security headers middleware."""

    @pytest.fixture
    def app_with_security_headers(self):
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/test")
        def test_endpoint():
            return {"message": "ok"}

        return app

    def test_adds_security_headers(self, app_with_security_headers):
        client = TestClient(app_with_security_headers)
        response = client.get("/test")

        assert response.headers.get("X-Content-Type-Options") == "nosniff"
        assert response.headers.get("X-Frame-Options") == "DENY"
        assert response.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"

    def test_adds_hsts_in_production(self, app_with_security_headers):
        """Should add HSTS header only in production."""
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.environment = "production"
            client = TestClient(app_with_security_headers)
            response = client.get("/test")

        assert "max-age=31536000" in response.headers.get("Strict-Transport-Security", "")

    def test_no_hsts_in_development(self, app_with_security_headers):
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.environment = "development"
            client = TestClient(app_with_security_headers)
            response = client.get("/test")

        assert "Strict-Transport-Security" not in response.headers


# =============================================================================
# TrustedPrincipalHeadersMiddleware Tests
# =============================================================================

class TestTrustedPrincipalHeadersMiddleware:
    """Tests for the gateway principal adapter."""

    @pytest.fixture
    def app_with_principal_headers(self):
        app = FastAPI()
        app.add_middleware(TrustedPrincipalHeadersMiddleware)

        @app.get("/whoami")
        def whoami(request: Request):
            principal = getattr(request.state, "principal", None)
            if principal is None:
                return {"principal": None}
            return {
                "principal": principal.id,
                "role": principal.role.value,
                "job_role": principal.job_role,
                "grant": principal.location_grant.to_wire(),
            }

        return app

    def test_builds_principal(self, app_with_principal_headers):
        client = TestClient(app_with_principal_headers)
        headers = principal_headers("manager", ["loc2", "loc1"], job_role="Location Manager")
        data = client.get("/whoami", headers=headers).json()

        assert data == {
            "principal": "p-1",
            "role": "MANAGER",
            "job_role": "location_manager",
            "grant": ["loc1", "loc2"],
        }

    def test_all_grant(self, app_with_principal_headers):
        client = TestClient(app_with_principal_headers)
        data = client.get("/whoami", headers=principal_headers("STAFF", ["ALL"])).json()
        assert data["grant"] == ["all"]

    def test_missing_role_leaves_request_anonymous(self, app_with_principal_headers):
        client = TestClient(app_with_principal_headers)
        data = client.get("/whoami", headers={"X-Principal-Id": "p-1"}).json()
        assert data["principal"] is None

    def test_malformed_role_leaves_request_anonymous(self, app_with_principal_headers):
        client = TestClient(app_with_principal_headers)
        data = client.get("/whoami", headers=principal_headers("OWNER")).json()
        assert data["principal"] is None

    def test_principal_type(self, app_with_principal_headers):
        captured = []

        @app_with_principal_headers.get("/capture")
        def capture(request: Request):
            captured.append(request.state.principal)
            return {}

        TestClient(app_with_principal_headers).get("/capture", headers=principal_headers("ADMIN"))
        assert isinstance(captured[0], Principal)
        assert captured[0].is_admin


# =============================================================================
# CorrelationIdMiddleware Tests
# =============================================================================

class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    @pytest.fixture
    def app_with_correlation(self):
        app = FastAPI()
        app.add_middleware(CorrelationIdMiddleware)

        @app.get("/test")
        def test_endpoint():
            return {"request_id": get_request_id()}

        return app

    def test_generates_request_id_when_not_provided(self, app_with_correlation):
        client = TestClient(app_with_correlation)
        response = client.get("/test")

        request_id = response.headers.get("X-Request-ID")
        assert request_id is not None
        assert len(request_id) == 36  # UUID v4 length

    def test_uses_provided_request_id(self, app_with_correlation):
        client = TestClient(app_with_correlation)
        custom_id = "my-custom-request-id-12345"
        response = client.get("/test", headers={"X-Request-ID": custom_id})

        assert response.headers.get("X-Request-ID") == custom_id


# =============================================================================
# CorrelationIdFilter Tests
# =============================================================================

class TestCorrelationIdFilter:
    """Tests for correlation ID logging filter."""

    def test_adds_request_id_to_log_record(self):
        filter_obj = CorrelationIdFilter()
        token = request_id_var.set("test-request-123")

        try:
            record = MagicMock()
            assert filter_obj.filter(record) is True
            assert record.request_id == "test-request-123"
        finally:
            request_id_var.reset(token)

    def test_uses_dash_when_no_request_id(self):
        filter_obj = CorrelationIdFilter()
        token = request_id_var.set("")

        try:
            record = MagicMock()
            assert filter_obj.filter(record) is True
            assert record.request_id == "-"
        finally:
            request_id_var.reset(token)


# =============================================================================
# safe_commit Tests
# =============================================================================

class TestSafeCommit:
    """Tests for safe_commit utility."""

    def test_commits_successfully(self):
        mock_db = MagicMock()

        safe_commit(mock_db)

        mock_db.commit.assert_called_once()
        mock_db.rollback.assert_not_called()

    def test_rollbacks_and_reraises(self):
        mock_db = MagicMock()

        class CustomDBError(Exception):
            pass

        mock_db.commit.side_effect = CustomDBError("Custom error")

        with pytest.raises(CustomDBError):
            safe_commit(mock_db)

        mock_db.rollback.assert_called_once()


# =============================================================================
# get_db_context Tests
# =============================================================================

class TestGetDbContext:
    """Tests for the session context manager used by the CLI and startup seeding."""

    def test_closes_session_on_exit(self):
        mock_db = MagicMock()
        with patch("shared.infrastructure.db.SessionLocal", return_value=mock_db):
            with get_db_context() as db:
                assert db is mock_db

        mock_db.close.assert_called_once()

    def test_closes_session_on_error(self):
        mock_db = MagicMock()
        with patch("shared.infrastructure.db.SessionLocal", return_value=mock_db):
            with pytest.raises(RuntimeError):
                with get_db_context():
                    raise RuntimeError("seed failed")

        mock_db.close.assert_called_once()


# =============================================================================
# register_middlewares Tests
# =============================================================================

class TestRegisterMiddlewares:
    """Tests for middleware registration."""

    def test_registers_gateway_adapter_only_when_trusted(self):
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.trust_principal_headers = False
            app = FastAPI()
            register_middlewares(app)

        middleware_classes = [m.cls for m in app.user_middleware]
        assert SecurityHeadersMiddleware in middleware_classes
        assert CorrelationIdMiddleware in middleware_classes
        assert TrustedPrincipalHeadersMiddleware not in middleware_classes

    def test_registers_gateway_adapter(self):
        with patch("rest_api.core.middlewares.settings") as mock_settings:
            mock_settings.trust_principal_headers = True
            app = FastAPI()
            register_middlewares(app)

        middleware_classes = [m.cls for m in app.user_middleware]
        assert TrustedPrincipalHeadersMiddleware in middleware_classes
