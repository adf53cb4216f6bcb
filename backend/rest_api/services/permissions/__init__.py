"""
Location-scoped access control.

Three independent axes decide what a principal may do and see:
functional permissions (PermissionResolver), branch grants
(LocationGrantResolver) and per-resource visibility with the home-service
cross-location rules (VisibilityFilter). AccessGate combines them.

Usage:
    from rest_api.services.permissions import AccessGate, Principal, LocationRef

    gate = AccessGate.build(location_registry, override_source)
    if gate.has_permission(principal, Permissions.VIEW_STAFF):
        staff = gate.visible_subset(principal, staff, LocationRef.parse("loc1"))
"""

from .models import (
    ALL,
    HOME,
    ONLINE,
    Appointment,
    EMPTY_PERMISSIONS,
    LocationGrant,
    LocationKind,
    LocationRecord,
    LocationRef,
    PermissionSet,
    Principal,
    Resource,
    Service,
    StaffMember,
    WILDCARD_PERMISSIONS,
    offers_home_service,
    parse_location_refs,
)
from .registry import DEFAULT_REGISTRY, PermissionRegistry
from .sources import (
    CachedLocationRegistry,
    CustomRoleSource,
    InMemoryCustomRoleSource,
    InMemoryLocationRegistry,
    LocationRegistry,
    PermissionSourceError,
)
from .resolver import PermissionResolver
from .locations import LocationGrantResolver
from .visibility import QueryMatch, Visibility, VisibilityFilter, match_query
from .gate import AccessGate
from .navigation import (
    NAVIGATION_PERMISSIONS,
    accessible_routes,
    can_access_route,
    first_accessible_page,
)
from .context import PermissionContext

__all__ = [
    # Value types
    "ALL",
    "HOME",
    "ONLINE",
    "Appointment",
    "EMPTY_PERMISSIONS",
    "LocationGrant",
    "LocationKind",
    "LocationRecord",
    "LocationRef",
    "PermissionSet",
    "Principal",
    "Resource",
    "Service",
    "StaffMember",
    "WILDCARD_PERMISSIONS",
    "offers_home_service",
    "parse_location_refs",
    # Registry
    "DEFAULT_REGISTRY",
    "PermissionRegistry",
    # Collaborators
    "CachedLocationRegistry",
    "CustomRoleSource",
    "InMemoryCustomRoleSource",
    "InMemoryLocationRegistry",
    "LocationRegistry",
    "PermissionSourceError",
    # Engine
    "PermissionResolver",
    "LocationGrantResolver",
    "QueryMatch",
    "Visibility",
    "VisibilityFilter",
    "match_query",
    "AccessGate",
    # Navigation
    "NAVIGATION_PERMISSIONS",
    "accessible_routes",
    "can_access_route",
    "first_accessible_page",
    # Context
    "PermissionContext",
]
