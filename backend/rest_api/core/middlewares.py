"""
Middlewares for the FastAPI application: security headers, correlation IDs
and the trusted-gateway principal adapter.
"""

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware
from rest_api.services.permissions import LocationGrant, Principal

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff (prevent MIME sniffing)
    - X-Frame-Options: DENY (prevent clickjacking)
    - Referrer-Policy: strict-origin-when-cross-origin
    - Strict-Transport-Security: production only
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response


class TrustedPrincipalHeadersMiddleware(BaseHTTPMiddleware):
    """
    Build the request principal from headers set by an authenticating gateway.

    Only enable behind a gateway that strips these headers from client
    requests. Headers:
    - X-Principal-Id
    - X-Principal-Role (ADMIN, MANAGER, STAFF, CLIENT, RECEPTIONIST)
    - X-Principal-Job-Role (optional)
    - X-Principal-Locations (comma-separated ids or "all")

    Malformed headers leave the request unauthenticated (401 downstream).
    """

    async def dispatch(self, request: Request, call_next):
        principal_id = request.headers.get("X-Principal-Id")
        role = request.headers.get("X-Principal-Role")
        if principal_id and role:
            try:
                request.state.principal = Principal(
                    id=principal_id,
                    role=role,
                    job_role=request.headers.get("X-Principal-Job-Role"),
                    location_grant=LocationGrant.parse(
                        request.headers.get("X-Principal-Locations", "").split(",")
                    ),
                )
            except ValueError as e:
                logger.warning("Rejected malformed principal headers", role=role, error=str(e))
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    """
    Register middlewares on the FastAPI application.

    Order matters: middlewares are executed in reverse order of registration,
    so the correlation ID is bound before anything else logs.
    """
    app.add_middleware(SecurityHeadersMiddleware)
    if settings.trust_principal_headers:
        app.add_middleware(TrustedPrincipalHeadersMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
