"""
AccessGate - the facade every caller uses.

The action gate (has_permission) and the visibility gate (visible_subset) are
independent: callers check the action first and only then filter. The gate
itself never chains them.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from shared.config.constants import MANAGEMENT_ROLES, Permissions

from .locations import LocationGrantResolver
from .models import (
    Appointment,
    LocationGrant,
    LocationKind,
    LocationRef,
    PermissionSet,
    Principal,
    Resource,
)
from .registry import DEFAULT_REGISTRY, PermissionRegistry
from .resolver import PermissionResolver
from .sources import CustomRoleSource, LocationRegistry
from .visibility import QueryMatch, Visibility, VisibilityFilter, match_query

ResourceT = TypeVar("ResourceT", bound=Resource)


class AccessGate:
    def __init__(
        self,
        resolver: PermissionResolver,
        grant_resolver: LocationGrantResolver,
        visibility: VisibilityFilter | None = None,
    ):
        self._resolver = resolver
        self._grants = grant_resolver
        self._visibility = visibility or VisibilityFilter(grant_resolver)

    @classmethod
    def build(
        cls,
        location_registry: LocationRegistry,
        override_source: CustomRoleSource | None = None,
        registry: PermissionRegistry = DEFAULT_REGISTRY,
    ) -> AccessGate:
        """Wire the resolvers and filter from collaborator instances."""
        grants = LocationGrantResolver(location_registry)
        return cls(PermissionResolver(registry, override_source), grants)

    @property
    def grants(self) -> LocationGrantResolver:
        return self._grants

    @property
    def registry_label(self) -> str:
        return self._resolver.registry.label

    # -------------------------------------------------------------------------
    # Action gate
    # -------------------------------------------------------------------------

    def permissions(self, principal: Principal) -> PermissionSet:
        return self._resolver.resolve(principal)

    def has_permission(self, principal: Principal, action: str) -> bool:
        return self._resolver.has_permission(principal, action)

    def has_any_permission(self, principal: Principal, actions: Iterable[str]) -> bool:
        return self._resolver.has_any_permission(principal, actions)

    def can_access_staff_record(self, principal: Principal, staff_id: str) -> bool:
        """Management sees every staff record; others only their own."""
        return principal.role in MANAGEMENT_ROLES or principal.id == str(staff_id)

    # -------------------------------------------------------------------------
    # Location gate
    # -------------------------------------------------------------------------

    def canonical_grant(self, principal: Principal) -> LocationGrant:
        return self._grants.canonical_grant(principal)

    def can_select(self, principal: Principal, ref: LocationRef) -> bool:
        return self._grants.can_select(principal, ref)

    # -------------------------------------------------------------------------
    # Visibility gate
    # -------------------------------------------------------------------------

    def visible_subset(
        self,
        principal: Principal,
        resources: Iterable[ResourceT],
        query: LocationRef,
    ) -> list[ResourceT]:
        return self._visibility.visible(principal, resources, query)

    def explain_visibility(
        self,
        principal: Principal,
        resources: Iterable[ResourceT],
        query: LocationRef,
    ) -> list[Visibility[ResourceT]]:
        return self._visibility.explain(principal, resources, query)

    def visible_appointments(
        self,
        principal: Principal,
        appointments: Iterable[Appointment],
        query: LocationRef,
        permissions: PermissionSet | None = None,
    ) -> list[Visibility[Appointment]]:
        """
        Appointment listing with the own-appointments scope.

        view_appointments: the regular visible subset. Only
        view_own_appointments: the principal's own appointments at any
        location, flagged cross_location when outside the query. Neither:
        nothing. Pass permissions when they are already resolved.

        The reserved lenses and unknown branches yield nothing in the own
        scope too.
        """
        if permissions is None:
            permissions = self.permissions(principal)
        if permissions.allows(Permissions.VIEW_APPOINTMENTS):
            return self._visibility.explain(principal, appointments, query)
        if not permissions.allows(Permissions.VIEW_OWN_APPOINTMENTS):
            return []
        if query.is_virtual and not principal.is_admin:
            return []
        if query.kind == LocationKind.PHYSICAL and not self._grants.is_known_location(
            query.location_id or ""
        ):
            return []
        return [
            Visibility(a, cross_location=match_query(a, query) != QueryMatch.DIRECT)
            for a in appointments
            if a.staff_id == principal.id
        ]
