"""
Shared dependencies for routers: principal, access gate, permission context.

Usage:
    @router.get("/staff")
    def list_staff(
        ctx: PermissionContext = Depends(require_permission(Permissions.VIEW_STAFF)),
        db: Session = Depends(get_db),
    ):
        ...
"""

from functools import lru_cache
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal, get_db
from shared.utils.exceptions import UnauthorizedError
from rest_api.repositories import DbCustomRoleSource, DbLocationRegistry
from rest_api.services.permissions import (
    ALL,
    AccessGate,
    CachedLocationRegistry,
    LocationRef,
    PermissionContext,
    PermissionRegistry,
    Principal,
)


@lru_cache
def get_location_registry() -> CachedLocationRegistry:
    """Process-wide cached location registry."""
    return CachedLocationRegistry(
        DbLocationRegistry(SessionLocal),
        ttl_seconds=settings.location_cache_ttl_seconds,
    )


@lru_cache
def get_permission_registry() -> PermissionRegistry:
    return PermissionRegistry.default(settings.permission_registry_version)


def current_principal(request: Request) -> Principal:
    """Principal attached by the authentication layer; 401 when missing."""
    principal = getattr(request.state, "principal", None)
    if not isinstance(principal, Principal):
        raise UnauthorizedError(path=request.url.path)
    return principal


def get_access_gate(
    db: Session = Depends(get_db),
    locations: CachedLocationRegistry = Depends(get_location_registry),
    registry: PermissionRegistry = Depends(get_permission_registry),
) -> AccessGate:
    return AccessGate.build(locations, DbCustomRoleSource(db), registry)


def get_permission_context(
    principal: Principal = Depends(current_principal),
    gate: AccessGate = Depends(get_access_gate),
) -> PermissionContext:
    return PermissionContext(gate, principal)


def require_permission(action: str) -> Callable[..., PermissionContext]:
    """Dependency factory: 403 unless the principal may perform the action."""

    def dependency(ctx: PermissionContext = Depends(get_permission_context)) -> PermissionContext:
        ctx.require(action)
        return ctx

    return dependency


def require_any_permission(*actions: str) -> Callable[..., PermissionContext]:
    """Dependency factory: 403 unless the principal holds at least one action."""

    def dependency(ctx: PermissionContext = Depends(get_permission_context)) -> PermissionContext:
        ctx.require_any(*actions)
        return ctx

    return dependency


def parse_location_query(location: str | None) -> LocationRef:
    """?location= value; missing or blank means the "all" lens.

    Never fails: an unknown id parses as a branch that matches nothing.
    """
    if location is None or not location.strip():
        return ALL
    return LocationRef.parse(location)
