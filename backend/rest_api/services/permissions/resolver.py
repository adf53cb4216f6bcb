"""
Effective permission resolution.

Precedence, first match wins:
1. ADMIN (or the super-admin alias): wildcard.
2. The principal's job role, when the registry has an entry for it.
3. A non-empty custom-role override for the principal's role.
4. The registry's role table, or the empty set for an unknown role.
"""

from __future__ import annotations

from typing import Iterable

from shared.config.logging import get_logger, mask_principal_id

from .models import (
    EMPTY_PERMISSIONS,
    PermissionSet,
    Principal,
    WILDCARD_PERMISSIONS,
)
from .registry import DEFAULT_REGISTRY, PermissionRegistry
from .sources import CustomRoleSource, PermissionSourceError

logger = get_logger(__name__)


class PermissionResolver:
    def __init__(
        self,
        registry: PermissionRegistry = DEFAULT_REGISTRY,
        override_source: CustomRoleSource | None = None,
    ):
        self._registry = registry
        self._override_source = override_source

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    def resolve(self, principal: Principal) -> PermissionSet:
        """
        Resolve the effective permission set.

        Raises:
            PermissionSourceError: the override source raised; never
                swallowed, so callers fail closed.
        """
        if principal.is_admin:
            return WILDCARD_PERMISSIONS

        if principal.job_role:
            job_permissions = self._registry.permissions_for_job_role(principal.job_role)
            if job_permissions is not None:
                return job_permissions
            logger.debug(
                "No permission entry for job role, falling back",
                job_role=principal.job_role,
                registry=self._registry.label,
            )

        override = self._lookup_override(principal)
        if override is not None and not override.is_empty:
            logger.debug(
                "Using custom role permissions",
                role=principal.role.value,
                count=len(override),
            )
            return override

        role_permissions = self._registry.permissions_for_role(principal.role)
        if role_permissions is None:
            logger.debug("No permission entry for role", role=principal.role.value)
            return EMPTY_PERMISSIONS
        return role_permissions

    def has_permission(self, principal: Principal, action: str) -> bool:
        return self.resolve(principal).allows(action)

    def has_any_permission(self, principal: Principal, actions: Iterable[str]) -> bool:
        return self.resolve(principal).allows_any(actions)

    def _lookup_override(self, principal: Principal) -> PermissionSet | None:
        if self._override_source is None:
            return None
        role_id = principal.role.value
        try:
            return self._override_source.lookup_role_permissions(role_id)
        except Exception as exc:
            logger.error(
                "Custom role source failed, denying",
                role=role_id,
                principal=mask_principal_id(principal.id),
                error=str(exc),
            )
            raise PermissionSourceError(role_id) from exc
