"""
Resource visibility filter.

Two steps:

1. Query narrowing. ALL keeps every resource. HOME (admins only) keeps
   home-tagged resources and those tied to a home-service staff member.
   ONLINE (admins only) keeps online-tagged resources. A branch keeps the
   resources tagged with it, plus home-service resources whose staff member
   works at that branch.
2. Principal narrowing, skipped for admins. A resource survives when its
   locations intersect the principal's canonical grant, or through one of
   the cross-location rules below.

Cross-location rules keep mobile staff from being double booked: a home
appointment blocks the stylist's slot on their branch calendar, and a branch
appointment of a home-service stylist shows on the home-service board.
Resources included only through these rules are flagged cross_location.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, Iterable, TypeVar

from shared.config.logging import get_logger

from .locations import LocationGrantResolver
from .models import (
    HOME,
    LocationGrant,
    LocationKind,
    LocationRef,
    ONLINE,
    Principal,
    Resource,
    assigned_staff,
    offers_home_service,
)

logger = get_logger(__name__)

ResourceT = TypeVar("ResourceT", bound=Resource)


@dataclass(frozen=True)
class Visibility(Generic[ResourceT]):
    resource: ResourceT
    cross_location: bool = False


class QueryMatch(IntEnum):
    """How a single resource matches a query location."""

    NONE = 0
    DIRECT = 1
    CROSS = 2


def match_query(resource: Resource, query: LocationRef) -> QueryMatch:
    """Role-independent match of a resource against a query location."""
    locations = resource.locations

    if query.kind == LocationKind.ALL:
        return QueryMatch.DIRECT

    if query.kind == LocationKind.HOME:
        if HOME in locations:
            return QueryMatch.DIRECT
        if offers_home_service(resource):
            # A home-capable staff member is a direct home resource; their
            # branch appointments are cross-location blocks.
            return QueryMatch.CROSS if assigned_staff(resource) is not None else QueryMatch.DIRECT
        return QueryMatch.NONE

    if query.kind == LocationKind.ONLINE:
        return QueryMatch.DIRECT if ONLINE in locations else QueryMatch.NONE

    if query in locations:
        return QueryMatch.DIRECT
    if HOME in locations:
        staff = assigned_staff(resource)
        if staff is not None and query in staff.locations:
            return QueryMatch.CROSS
    return QueryMatch.NONE


class VisibilityFilter:
    """
    Usage:
        vf = VisibilityFilter(LocationGrantResolver(registry))
        visible = vf.visible(principal, appointments, LocationRef.physical("loc1"))
        for item in vf.explain(principal, appointments, HOME):
            print(item.resource.id, item.cross_location)
    """

    def __init__(self, grant_resolver: LocationGrantResolver):
        self._grants = grant_resolver

    def explain(
        self,
        principal: Principal,
        resources: Iterable[ResourceT],
        query: LocationRef,
    ) -> list[Visibility[ResourceT]]:
        """Visible resources in input order, with the cross-location flag."""
        resources = list(resources)

        if query.kind == LocationKind.PHYSICAL and not self._grants.is_known_location(
            query.location_id or ""
        ):
            logger.debug("Query location unknown, returning nothing", location=str(query))
            return []

        if query.is_virtual and not principal.is_admin:
            return []

        candidates: list[Visibility[ResourceT]] = []
        for resource in resources:
            outcome = match_query(resource, query)
            if outcome != QueryMatch.NONE:
                candidates.append(Visibility(resource, cross_location=outcome == QueryMatch.CROSS))

        if principal.is_admin:
            return candidates

        grant = self._grants.canonical_grant(principal)
        if grant.all_locations:
            return candidates
        return [c for c in candidates if self._passes_grant(grant, c, query)]

    def visible(
        self,
        principal: Principal,
        resources: Iterable[ResourceT],
        query: LocationRef,
    ) -> list[ResourceT]:
        return [v.resource for v in self.explain(principal, resources, query)]

    @staticmethod
    def _passes_grant(
        grant: LocationGrant,
        candidate: Visibility[ResourceT],
        query: LocationRef,
    ) -> bool:
        resource = candidate.resource
        if grant.intersects(resource.locations):
            return True

        if query.kind != LocationKind.PHYSICAL or not grant.contains(query):
            return False

        # Home resource of a stylist based at the queried branch. This is also
        # the receptionist's whole-branch view: every other candidate at a
        # granted branch already intersects the grant.
        return candidate.cross_location and HOME in resource.locations
