"""
Route-level permission table for the dashboard navigation.

A route is accessible when the principal holds any one of its listed
permissions. Routes missing from the table are not gated here.
"""

from __future__ import annotations

from typing import Final, Mapping

from shared.config.constants import Permissions as P

from .models import PermissionSet

NAVIGATION_PERMISSIONS: Final[Mapping[str, tuple[str, ...]]] = {
    "/dashboard": (P.VIEW_DASHBOARD,),
    "/dashboard/appointments": (P.VIEW_APPOINTMENTS, P.VIEW_OWN_APPOINTMENTS),
    "/dashboard/clients": (P.VIEW_CLIENTS,),
    "/dashboard/services": (P.VIEW_SERVICES,),
    "/dashboard/staff": (P.VIEW_STAFF,),
    "/dashboard/inventory": (P.VIEW_INVENTORY,),
    "/dashboard/orders": (P.VIEW_ACCOUNTING,),
    "/dashboard/pos": (P.VIEW_POS,),
    "/dashboard/gift-cards-memberships": (P.VIEW_GIFT_CARDS, P.VIEW_MEMBERSHIPS),
    "/dashboard/accounting": (P.VIEW_ACCOUNTING,),
    "/dashboard/hr": (P.VIEW_HR,),
    "/dashboard/reports": (P.VIEW_REPORTS,),
    "/dashboard/settings": (P.VIEW_SETTINGS,),
    "/client-portal": (P.VIEW_CLIENT_PORTAL,),
}

# Landing page candidates, highest priority first
LANDING_PAGE_ORDER: Final[tuple[str, ...]] = (
    "/dashboard",
    "/dashboard/appointments",
    "/dashboard/clients",
    "/dashboard/services",
    "/dashboard/pos",
    "/dashboard/inventory",
    "/dashboard/staff",
    "/dashboard/accounting",
    "/dashboard/hr",
    "/dashboard/reports",
    "/dashboard/settings",
)

FALLBACK_LANDING_PAGE: Final[str] = "/dashboard/appointments"


def can_access_route(permissions: PermissionSet, path: str) -> bool:
    required = NAVIGATION_PERMISSIONS.get(path.rstrip("/") or "/")
    if not required:
        return True
    return permissions.allows_any(required)


def accessible_routes(permissions: PermissionSet) -> list[str]:
    return [path for path in NAVIGATION_PERMISSIONS if can_access_route(permissions, path)]


def first_accessible_page(permissions: PermissionSet) -> str:
    for path in LANDING_PAGE_ORDER:
        if permissions.allows_any(NAVIGATION_PERMISSIONS[path]):
            return path
    return FALLBACK_LANDING_PAGE
