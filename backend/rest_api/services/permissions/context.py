"""
Permission Context - per-request entry point for permission checks in routers.

Binds one principal to an AccessGate, caches the resolved permission set and
turns denials into HTTP exceptions.
"""

from __future__ import annotations

from typing import Iterable, TypeVar

from shared.config.constants import ADMIN_ROLES, ErrorMessages, MANAGEMENT_ROLES
from shared.config.logging import audit_access_event
from shared.utils.exceptions import (
    ExternalServiceError,
    ForbiddenError,
    LocationAccessError,
    MissingPermissionError,
)

from .gate import AccessGate
from .models import (
    Appointment,
    LocationGrant,
    LocationRef,
    PermissionSet,
    Principal,
    Resource,
)
from .navigation import accessible_routes, can_access_route, first_accessible_page
from .sources import PermissionSourceError
from .visibility import Visibility

ResourceT = TypeVar("ResourceT", bound=Resource)


class PermissionContext:
    """
    Context for performing permission checks.

    Usage:
        ctx = PermissionContext(gate, principal)

        ctx.require(Permissions.VIEW_STAFF)
        staff = ctx.visible(staff_members, LocationRef.parse(location))

        if ctx.can(Permissions.MANAGE_LOCATIONS):
            ...
    """

    def __init__(self, gate: AccessGate, principal: Principal):
        self._gate = gate
        self._principal = principal
        self._permissions: PermissionSet | None = None

    @property
    def principal(self) -> Principal:
        return self._principal

    @property
    def gate(self) -> AccessGate:
        return self._gate

    @property
    def is_admin(self) -> bool:
        return self._principal.role in ADMIN_ROLES

    @property
    def is_management(self) -> bool:
        return self._principal.role in MANAGEMENT_ROLES

    @property
    def permissions(self) -> PermissionSet:
        """
        Resolved permission set, computed once per request.

        A broken custom-role source is reported as 503, never as a fallback.
        """
        if self._permissions is None:
            try:
                self._permissions = self._gate.permissions(self._principal)
            except PermissionSourceError as exc:
                raise ExternalServiceError(
                    "custom-roles",
                    is_unavailable=True,
                    detail=ErrorMessages.PERMISSION_SOURCE_UNAVAILABLE,
                    role=exc.role_id,
                ) from exc
        return self._permissions

    @property
    def grant(self) -> LocationGrant:
        return self._gate.canonical_grant(self._principal)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def can(self, action: str) -> bool:
        return self.permissions.allows(action)

    def can_any(self, *actions: str) -> bool:
        return self.permissions.allows_any(actions)

    def require(self, action: str) -> None:
        """Raise MissingPermissionError unless the action is allowed."""
        if not self.can(action):
            self._audit_denied(action)
            raise MissingPermissionError(action, principal_role=self._principal.role.value)

    def require_any(self, *actions: str) -> None:
        if not self.can_any(*actions):
            self._audit_denied(*actions)
            raise MissingPermissionError(*actions, principal_role=self._principal.role.value)

    def can_access_staff_record(self, staff_id: str) -> bool:
        return self._gate.can_access_staff_record(self._principal, staff_id)

    def require_staff_record_access(self, staff_id: str) -> None:
        if not self.can_access_staff_record(staff_id):
            audit_access_event(
                "STAFF_RECORD_DENIED",
                principal_id=self._principal.id,
                role=self._principal.role.value,
                reason="not own record",
            )
            raise ForbiddenError("access this staff record", staff_id=staff_id)

    # -------------------------------------------------------------------------
    # Locations
    # -------------------------------------------------------------------------

    def can_select(self, ref: LocationRef) -> bool:
        return self._gate.can_select(self._principal, ref)

    def require_selectable(self, ref: LocationRef) -> None:
        """Raise LocationAccessError when the principal may not pick the location."""
        if self.can_select(ref):
            return
        reason = "reserved lens" if ref.is_reserved else "not in grant"
        audit_access_event(
            "LOCATION_REJECTED",
            principal_id=self._principal.id,
            role=self._principal.role.value,
            reason=reason,
            location=str(ref),
        )
        raise LocationAccessError(str(ref), reason=reason)

    def selectable_locations(self) -> list[LocationRef]:
        return self._gate.grants.selectable_locations(self._principal)

    def default_location(self) -> LocationRef | None:
        return self._gate.grants.default_location(self._principal)

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    def visible(self, resources: Iterable[ResourceT], query: LocationRef) -> list[ResourceT]:
        return self._gate.visible_subset(self._principal, resources, query)

    def explain(
        self, resources: Iterable[ResourceT], query: LocationRef
    ) -> list[Visibility[ResourceT]]:
        return self._gate.explain_visibility(self._principal, resources, query)

    def visible_appointments(
        self, appointments: Iterable[Appointment], query: LocationRef
    ) -> list[Visibility[Appointment]]:
        return self._gate.visible_appointments(
            self._principal, appointments, query, permissions=self.permissions
        )

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def can_access_route(self, path: str) -> bool:
        return can_access_route(self.permissions, path)

    def accessible_routes(self) -> list[str]:
        return accessible_routes(self.permissions)

    def first_accessible_page(self) -> str:
        return first_accessible_page(self.permissions)

    def _audit_denied(self, *actions: str) -> None:
        audit_access_event(
            "PERMISSION_DENIED",
            principal_id=self._principal.id,
            role=self._principal.role.value,
            reason="missing permission",
            required=list(actions),
        )
