"""
Value types shared by the access-control engine.

All types are immutable: a Principal and its PermissionSet are built once per
request and discarded with the response; resources are read-only snapshots of
stored rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Protocol, runtime_checkable

from shared.config.constants import (
    ADMIN_ROLES,
    LocationTag,
    Permissions,
    Role,
    normalize_job_role,
)


# =============================================================================
# Location references
# =============================================================================


class LocationKind(str, Enum):
    """Variants of a location reference."""

    PHYSICAL = "physical"
    HOME = "home"
    ONLINE = "online"
    ALL = "all"


@dataclass(frozen=True, order=True)
class LocationRef:
    """
    A physical branch or one of the reserved tags (home, online, all).

    Usage:
        LocationRef.physical("loc1")
        LocationRef.parse("home") == HOME
    """

    kind: LocationKind
    location_id: str | None = None

    def __post_init__(self) -> None:
        if self.kind == LocationKind.PHYSICAL and not self.location_id:
            raise ValueError("Physical location reference requires an id")
        if self.kind != LocationKind.PHYSICAL and self.location_id is not None:
            raise ValueError(f"{self.kind.value} reference cannot carry an id")

    @classmethod
    def physical(cls, location_id: str) -> LocationRef:
        return cls(LocationKind.PHYSICAL, str(location_id))

    @classmethod
    def parse(cls, raw: str | LocationRef) -> LocationRef:
        """Parse a wire value. Reserved tags are matched case-insensitively."""
        if isinstance(raw, LocationRef):
            return raw
        value = str(raw).strip()
        if not value:
            raise ValueError("Empty location reference")
        lowered = value.lower()
        if lowered == LocationTag.ALL:
            return ALL
        if lowered == LocationTag.HOME:
            return HOME
        if lowered == LocationTag.ONLINE:
            return ONLINE
        return cls.physical(value)

    @property
    def is_physical(self) -> bool:
        return self.kind == LocationKind.PHYSICAL

    @property
    def is_virtual(self) -> bool:
        return self.kind in (LocationKind.HOME, LocationKind.ONLINE)

    @property
    def is_reserved(self) -> bool:
        """Tags only an admin may pick as their own active scope."""
        return self.kind != LocationKind.PHYSICAL

    def __str__(self) -> str:
        if self.kind == LocationKind.PHYSICAL:
            return self.location_id or ""
        return self.kind.value


HOME = LocationRef(LocationKind.HOME)
ONLINE = LocationRef(LocationKind.ONLINE)
ALL = LocationRef(LocationKind.ALL)


def parse_location_refs(values: Iterable[str] | None) -> frozenset[LocationRef]:
    """Parse stored tag strings, skipping blanks."""
    if not values:
        return frozenset()
    return frozenset(LocationRef.parse(v) for v in values if v and str(v).strip())


@dataclass(frozen=True)
class LocationGrant:
    """
    The locations a principal is authorized to see: ALL or a finite set.

    A raw grant may contain virtual tags or stale ids; the canonical form
    produced by LocationGrantResolver holds only known physical refs.
    """

    refs: frozenset[LocationRef] = frozenset()
    all_locations: bool = False

    @classmethod
    def everything(cls) -> LocationGrant:
        return cls(frozenset(), all_locations=True)

    @classmethod
    def of(cls, *refs: LocationRef | str) -> LocationGrant:
        return cls.parse(refs)

    @classmethod
    def parse(cls, raw: Iterable[LocationRef | str] | None) -> LocationGrant:
        """Build a grant from stored values; any "all" entry makes it the wildcard."""
        refs = frozenset(LocationRef.parse(v) for v in (raw or ()) if str(v).strip())
        if ALL in refs:
            return cls.everything()
        return cls(refs)

    @property
    def is_empty(self) -> bool:
        return not self.all_locations and not self.refs

    @property
    def physical_ids(self) -> frozenset[str]:
        return frozenset(r.location_id for r in self.refs if r.is_physical and r.location_id)

    def contains(self, ref: LocationRef) -> bool:
        return self.all_locations or ref in self.refs

    def intersects(self, refs: Iterable[LocationRef]) -> bool:
        if self.all_locations:
            return True
        return not self.refs.isdisjoint(refs)

    def to_wire(self) -> list[str]:
        if self.all_locations:
            return [LocationTag.ALL]
        return sorted(str(r) for r in self.refs)


# =============================================================================
# Principal
# =============================================================================


@dataclass(frozen=True)
class Principal:
    """The authenticated actor for one request."""

    id: str
    role: Role
    job_role: str | None = None
    location_grant: LocationGrant = field(default_factory=LocationGrant)

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "role", Role.parse(self.role))
        object.__setattr__(self, "job_role", normalize_job_role(self.job_role))

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


# =============================================================================
# Permission sets
# =============================================================================


@dataclass(frozen=True)
class PermissionSet:
    """A set of permission tokens; the "all" token grants every action."""

    tokens: frozenset[str] = frozenset()

    @classmethod
    def of(cls, *tokens: str) -> PermissionSet:
        return cls(frozenset(t for t in tokens if t))

    @property
    def is_wildcard(self) -> bool:
        return Permissions.ALL in self.tokens

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def allows(self, action: str) -> bool:
        return self.is_wildcard or action in self.tokens

    def allows_any(self, actions: Iterable[str]) -> bool:
        if self.is_wildcard:
            return True
        return any(action in self.tokens for action in actions)

    def sorted_tokens(self) -> list[str]:
        return sorted(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


EMPTY_PERMISSIONS = PermissionSet()
WILDCARD_PERMISSIONS = PermissionSet.of(Permissions.ALL)


# =============================================================================
# Resources
# =============================================================================


@runtime_checkable
class Resource(Protocol):
    """Anything tagged with location references."""

    id: str

    @property
    def locations(self) -> frozenset[LocationRef]:
        ...


@dataclass(frozen=True)
class StaffMember:
    id: str
    name: str
    locations: frozenset[LocationRef] = frozenset()
    offers_home_service: bool = False
    job_role: str | None = None


@dataclass(frozen=True)
class Appointment:
    id: str
    location: LocationRef
    staff: StaffMember | None = None
    client_name: str | None = None
    service_name: str | None = None
    starts_at: datetime | None = None

    @property
    def locations(self) -> frozenset[LocationRef]:
        return frozenset({self.location})

    @property
    def staff_id(self) -> str | None:
        return self.staff.id if self.staff else None


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    locations: frozenset[LocationRef] = frozenset()


@dataclass(frozen=True)
class LocationRecord:
    """A branch row; the canonical source of valid physical ids."""

    id: str
    name: str
    address: str | None = None
    city: str | None = None
    is_active: bool = True

    @property
    def locations(self) -> frozenset[LocationRef]:
        return frozenset({LocationRef.physical(self.id)})


def offers_home_service(resource: Resource) -> bool:
    """Home-service capability of a resource or of its assigned staff member."""
    if isinstance(resource, StaffMember):
        return resource.offers_home_service
    if isinstance(resource, Appointment):
        return resource.staff is not None and resource.staff.offers_home_service
    return False


def assigned_staff(resource: Resource) -> StaffMember | None:
    if isinstance(resource, Appointment):
        return resource.staff
    return None
