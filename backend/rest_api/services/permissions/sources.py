"""
Collaborator contracts consumed by the access-control engine.

- CustomRoleSource: business-configured permission overrides keyed by role id.
- LocationRegistry: the set of active physical location ids.

Both are read-only from the engine's point of view. SQLAlchemy-backed
implementations live in rest_api.repositories; the in-memory ones here serve
tests and tooling.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable, Mapping, Protocol, runtime_checkable

from shared.config.logging import get_logger

from .models import PermissionSet

logger = get_logger(__name__)


class PermissionSourceError(Exception):
    """
    The custom-role override source failed.

    Permission resolution cannot proceed; callers must deny rather than fall
    back to the default tables.
    """

    def __init__(self, role_id: str, message: str | None = None):
        self.role_id = role_id
        super().__init__(message or f"Custom role lookup failed for role {role_id!r}")


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class CustomRoleSource(Protocol):
    def lookup_role_permissions(self, role_id: str) -> PermissionSet | None:
        """Permission override for a role id (case-insensitive), or None."""
        ...


@runtime_checkable
class LocationRegistry(Protocol):
    def list_active_physical_locations(self) -> frozenset[str]:
        """Ids of every active physical location."""
        ...


# =============================================================================
# In-memory implementations
# =============================================================================


class InMemoryCustomRoleSource:
    """
    Dict-backed override source.

    Exact key match first, then case-insensitive.
    """

    def __init__(self, roles: Mapping[str, Iterable[str] | PermissionSet] | None = None):
        self._roles: dict[str, PermissionSet] = {}
        for role_id, permissions in (roles or {}).items():
            self.set_role(role_id, permissions)

    def set_role(self, role_id: str, permissions: Iterable[str] | PermissionSet) -> None:
        if not isinstance(permissions, PermissionSet):
            permissions = PermissionSet.of(*permissions)
        self._roles[role_id] = permissions

    def lookup_role_permissions(self, role_id: str) -> PermissionSet | None:
        if role_id in self._roles:
            return self._roles[role_id]
        lowered = role_id.lower()
        for key, permissions in self._roles.items():
            if key.lower() == lowered:
                return permissions
        return None


class InMemoryLocationRegistry:
    def __init__(self, location_ids: Iterable[str] = ()):
        self._ids = frozenset(str(i) for i in location_ids)

    def replace(self, location_ids: Iterable[str]) -> None:
        self._ids = frozenset(str(i) for i in location_ids)

    def list_active_physical_locations(self) -> frozenset[str]:
        return self._ids


class CachedLocationRegistry:
    """
    TTL cache in front of another LocationRegistry.

    Whoever mutates location records calls invalidate(); the TTL only bounds
    staleness for writers that bypass this process.

    Usage:
        registry = CachedLocationRegistry(DbLocationRegistry(SessionLocal), ttl_seconds=300)
        registry.list_active_physical_locations()
        registry.invalidate()  # after creating or deleting a location
    """

    def __init__(
        self,
        inner: LocationRegistry,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._inner = inner
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._cached: frozenset[str] | None = None
        self._loaded_at = 0.0

    def list_active_physical_locations(self) -> frozenset[str]:
        with self._lock:
            now = self._clock()
            if self._cached is not None and now - self._loaded_at < self._ttl:
                return self._cached
            self._cached = frozenset(self._inner.list_active_physical_locations())
            self._loaded_at = now
            logger.debug("Location registry refreshed", count=len(self._cached))
            return self._cached

    def invalidate(self) -> None:
        with self._lock:
            self._cached = None
        logger.info("Location registry cache invalidated")
