"""
Location grant validation and location selection rules.
"""

from __future__ import annotations

from shared.config.logging import get_logger, mask_principal_id

from .models import ALL, HOME, LocationGrant, LocationRef, ONLINE, Principal
from .sources import LocationRegistry

logger = get_logger(__name__)


class LocationGrantResolver:
    """
    Canonicalizes grants against the location registry and decides which
    locations a principal may pick as their active scope.

    ALL, HOME and ONLINE are admin-only lenses: a non-admin may still see
    resources cross-visible through them but can never select them.
    """

    def __init__(self, location_registry: LocationRegistry):
        self._registry = location_registry

    def active_location_ids(self) -> frozenset[str]:
        return self._registry.list_active_physical_locations()

    def is_known_location(self, location_id: str) -> bool:
        return location_id in self.active_location_ids()

    def canonical_grant(self, principal: Principal) -> LocationGrant:
        """
        ALL stays ALL. Otherwise keep only physical refs that still exist;
        virtual tags and stale ids are dropped.
        """
        grant = principal.location_grant
        if grant.all_locations:
            return LocationGrant.everything()

        known = self.active_location_ids()
        kept: set[LocationRef] = set()
        stale: list[str] = []
        for ref in grant.refs:
            if not ref.is_physical:
                continue
            if ref.location_id in known:
                kept.add(ref)
            else:
                stale.append(str(ref))

        if stale:
            logger.warning(
                "Dropping unknown locations from grant",
                principal=mask_principal_id(principal.id),
                locations=sorted(stale),
            )
        return LocationGrant(frozenset(kept))

    def can_select(self, principal: Principal, ref: LocationRef) -> bool:
        if principal.is_admin:
            return True
        if ref.is_reserved:
            logger.info(
                "Reserved location lens rejected",
                principal=mask_principal_id(principal.id),
                location=str(ref),
            )
            return False
        if ref.location_id not in self.active_location_ids():
            return False
        return self.canonical_grant(principal).contains(ref)

    def selectable_locations(self, principal: Principal) -> list[LocationRef]:
        """
        Options for the location switcher, in display order.

        Admins: All, every active branch, Home, Online. Others: their valid
        branches (every active branch for an ALL grant).
        """
        active = sorted(self.active_location_ids())
        if principal.is_admin:
            return [ALL, *(LocationRef.physical(i) for i in active), HOME, ONLINE]

        grant = self.canonical_grant(principal)
        if grant.all_locations:
            return [LocationRef.physical(i) for i in active]
        return sorted(grant.refs, key=lambda r: r.location_id or "")

    def default_location(self, principal: Principal) -> LocationRef | None:
        """Initial selection: ALL for admins, else the first valid branch."""
        if principal.is_admin:
            return ALL
        options = self.selectable_locations(principal)
        return options[0] if options else None
