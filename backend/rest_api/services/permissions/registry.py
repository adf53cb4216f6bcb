"""
Static permission tables.

PermissionRegistry is an immutable, versioned snapshot. Resolvers receive it
explicitly; evolving the tables (a new business-configured job role) produces
a new snapshot instead of mutating the one other requests are reading.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from shared.config.constants import JobRoles, Permissions as P, Role, normalize_job_role

from .models import PermissionSet, WILDCARD_PERMISSIONS


# =============================================================================
# Default tables
# =============================================================================


ORG_ADMIN_PERMISSIONS = PermissionSet.of(
    P.VIEW_DASHBOARD,
    P.VIEW_APPOINTMENTS, P.CREATE_APPOINTMENT, P.EDIT_APPOINTMENT, P.DELETE_APPOINTMENT,
    P.VIEW_CLIENTS, P.CREATE_CLIENT, P.EDIT_CLIENT, P.DELETE_CLIENT,
    P.VIEW_SERVICES, P.CREATE_SERVICE, P.EDIT_SERVICE, P.DELETE_SERVICE,
    P.VIEW_STAFF, P.CREATE_STAFF, P.EDIT_STAFF, P.DELETE_STAFF,
    P.VIEW_STAFF_SCHEDULE, P.EDIT_STAFF_SCHEDULE,
    P.VIEW_INVENTORY, P.CREATE_INVENTORY, P.EDIT_INVENTORY, P.DELETE_INVENTORY,
    P.VIEW_POS, P.CREATE_SALE, P.EDIT_SALE, P.DELETE_SALE, P.APPLY_DISCOUNT, P.ISSUE_REFUND,
    P.VIEW_ACCOUNTING, P.MANAGE_ACCOUNTING,
    P.VIEW_HR, P.MANAGE_HR,
    P.VIEW_REPORTS, P.EXPORT_REPORTS,
    P.VIEW_COMPANY_DOCUMENTS, P.MANAGE_COMPANY_DOCUMENTS,
    P.VIEW_SETTINGS, P.EDIT_SETTINGS, P.MANAGE_USERS, P.MANAGE_ROLES, P.MANAGE_LOCATIONS,
    P.VIEW_CLIENT_PORTAL, P.MANAGE_CLIENT_PORTAL,
    P.VIEW_CHAT, P.SEND_MESSAGES, P.CREATE_CHANNELS, P.MANAGE_CHANNELS, P.MODERATE_CHAT,
    P.VIEW_ALL_CHANNELS, P.SEND_PRODUCT_REQUESTS, P.SEND_HELP_REQUESTS,
    P.VIEW_GIFT_CARDS, P.CREATE_GIFT_CARD, P.EDIT_GIFT_CARD, P.DELETE_GIFT_CARD,
    P.REDEEM_GIFT_CARD, P.REFUND_GIFT_CARD, P.MANAGE_GIFT_CARD_SETTINGS,
    P.VIEW_MEMBERSHIPS, P.CREATE_MEMBERSHIP, P.EDIT_MEMBERSHIP, P.DELETE_MEMBERSHIP,
    P.CANCEL_MEMBERSHIP, P.RENEW_MEMBERSHIP, P.MANAGE_MEMBERSHIP_TIERS, P.MANAGE_MEMBERSHIP_SETTINGS,
)

# No dashboard: only admins get it
LOCATION_MANAGER_PERMISSIONS = PermissionSet.of(
    P.VIEW_APPOINTMENTS, P.CREATE_APPOINTMENT, P.EDIT_APPOINTMENT, P.DELETE_APPOINTMENT,
    P.VIEW_CLIENTS, P.CREATE_CLIENT, P.EDIT_CLIENT, P.DELETE_CLIENT,
    P.VIEW_SERVICES, P.CREATE_SERVICE, P.EDIT_SERVICE,
    P.VIEW_STAFF, P.CREATE_STAFF, P.EDIT_STAFF,
    P.VIEW_STAFF_SCHEDULE, P.EDIT_STAFF_SCHEDULE,
    P.VIEW_INVENTORY, P.CREATE_INVENTORY, P.EDIT_INVENTORY,
    P.VIEW_POS, P.CREATE_SALE, P.EDIT_SALE, P.APPLY_DISCOUNT,
    P.VIEW_ACCOUNTING,
    P.VIEW_REPORTS, P.EXPORT_REPORTS,
    P.VIEW_COMPANY_DOCUMENTS, P.MANAGE_COMPANY_DOCUMENTS,
    P.VIEW_SETTINGS,
    P.VIEW_CHAT, P.SEND_MESSAGES, P.CREATE_CHANNELS, P.MODERATE_CHAT,
    P.SEND_PRODUCT_REQUESTS, P.SEND_HELP_REQUESTS,
    P.VIEW_GIFT_CARDS, P.CREATE_GIFT_CARD, P.EDIT_GIFT_CARD,
    P.REDEEM_GIFT_CARD, P.REFUND_GIFT_CARD,
    P.VIEW_MEMBERSHIPS, P.CREATE_MEMBERSHIP, P.EDIT_MEMBERSHIP,
    P.CANCEL_MEMBERSHIP, P.RENEW_MEMBERSHIP,
)

RECEPTIONIST_PERMISSIONS = PermissionSet.of(
    P.VIEW_APPOINTMENTS, P.CREATE_APPOINTMENT, P.EDIT_APPOINTMENT,
    P.VIEW_CLIENTS, P.CREATE_CLIENT, P.EDIT_CLIENT,
    P.VIEW_SERVICES,
    P.VIEW_STAFF, P.VIEW_STAFF_SCHEDULE,
    P.VIEW_INVENTORY, P.CREATE_INVENTORY,
    P.VIEW_POS, P.CREATE_SALE,
    P.VIEW_CHAT, P.SEND_MESSAGES, P.SEND_PRODUCT_REQUESTS, P.SEND_HELP_REQUESTS,
    P.VIEW_GIFT_CARDS, P.CREATE_GIFT_CARD, P.REDEEM_GIFT_CARD,
    P.VIEW_MEMBERSHIPS, P.CREATE_MEMBERSHIP,
)

# Point of sale and inventory only; online orders carry no appointments or clients
ONLINE_STORE_RECEPTIONIST_PERMISSIONS = PermissionSet.of(
    P.VIEW_INVENTORY, P.CREATE_INVENTORY, P.TRANSFER_INVENTORY,
    P.VIEW_POS, P.CREATE_SALE,
    P.VIEW_CHAT, P.SEND_MESSAGES, P.SEND_PRODUCT_REQUESTS, P.SEND_HELP_REQUESTS,
)

STAFF_PERMISSIONS = PermissionSet.of(
    P.VIEW_OWN_APPOINTMENTS, P.EDIT_OWN_APPOINTMENTS,
    P.VIEW_OWN_CLIENTS,
    P.VIEW_SERVICES,
    P.VIEW_OWN_SCHEDULE,
    P.VIEW_POS, P.CREATE_SALE,
    P.VIEW_CHAT, P.SEND_MESSAGES, P.SEND_PRODUCT_REQUESTS, P.SEND_HELP_REQUESTS,
)

# CLIENT has no entry: it resolves to the empty set
DEFAULT_ROLE_PERMISSIONS: Mapping[Role, PermissionSet] = {
    Role.ADMIN: WILDCARD_PERMISSIONS,
    Role.SUPER_ADMIN: WILDCARD_PERMISSIONS,
    Role.MANAGER: LOCATION_MANAGER_PERMISSIONS,
    Role.RECEPTIONIST: RECEPTIONIST_PERMISSIONS,
    Role.STAFF: STAFF_PERMISSIONS,
}

DEFAULT_JOB_ROLE_PERMISSIONS: Mapping[str, PermissionSet] = {
    JobRoles.ADMIN: WILDCARD_PERMISSIONS,
    JobRoles.SUPER_ADMIN: WILDCARD_PERMISSIONS,
    JobRoles.ORG_ADMIN: ORG_ADMIN_PERMISSIONS,
    JobRoles.LOCATION_MANAGER: LOCATION_MANAGER_PERMISSIONS,
    JobRoles.RECEPTIONIST: RECEPTIONIST_PERMISSIONS,
    JobRoles.ONLINE_STORE_RECEPTIONIST: ONLINE_STORE_RECEPTIONIST_PERMISSIONS,
    JobRoles.STAFF: STAFF_PERMISSIONS,
}


# =============================================================================
# Registry snapshot
# =============================================================================


@dataclass(frozen=True)
class PermissionRegistry:
    """
    Role and job-role lookup tables.

    Lookups never fail: an unknown role or job role yields None ("absent").

    Usage:
        registry = PermissionRegistry.default()
        registry.permissions_for_role(Role.STAFF)
        registry.permissions_for_job_role("receptionist")

        extended = registry.with_job_role("front_desk", ["view_appointments"])
        assert extended.revision == registry.revision + 1
    """

    version: str
    role_permissions: Mapping[Role, PermissionSet] = field(default_factory=dict)
    job_role_permissions: Mapping[str, PermissionSet] = field(default_factory=dict)
    revision: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "role_permissions", MappingProxyType(dict(self.role_permissions))
        )
        normalized: dict[str, PermissionSet] = {}
        for job_role, permissions in self.job_role_permissions.items():
            key = normalize_job_role(job_role)
            if key:
                normalized[key] = permissions
        object.__setattr__(self, "job_role_permissions", MappingProxyType(normalized))

    @classmethod
    def default(cls, version: str = "builtin") -> PermissionRegistry:
        return cls(
            version=version,
            role_permissions=DEFAULT_ROLE_PERMISSIONS,
            job_role_permissions=DEFAULT_JOB_ROLE_PERMISSIONS,
        )

    @property
    def label(self) -> str:
        """Version string including the revision, e.g. "2025.1-r2"."""
        return f"{self.version}-r{self.revision}"

    def permissions_for_role(self, role: Role | str) -> PermissionSet | None:
        try:
            return self.role_permissions.get(Role.parse(role))
        except ValueError:
            return None

    def permissions_for_job_role(self, job_role: str | None) -> PermissionSet | None:
        key = normalize_job_role(job_role)
        if key is None:
            return None
        return self.job_role_permissions.get(key)

    def known_job_roles(self) -> list[str]:
        return sorted(self.job_role_permissions)

    def with_job_role(
        self, job_role: str, permissions: PermissionSet | Iterable[str]
    ) -> PermissionRegistry:
        """Return a new snapshot with the job role added or replaced."""
        key = normalize_job_role(job_role)
        if key is None:
            raise ValueError("Job role must not be blank")
        if not isinstance(permissions, PermissionSet):
            permissions = PermissionSet.of(*permissions)
        job_roles = dict(self.job_role_permissions)
        job_roles[key] = permissions
        return PermissionRegistry(
            version=self.version,
            role_permissions=self.role_permissions,
            job_role_permissions=job_roles,
            revision=self.revision + 1,
        )

    def without_job_role(self, job_role: str) -> PermissionRegistry:
        """Return a new snapshot with the job role removed (no-op if absent)."""
        key = normalize_job_role(job_role)
        if key not in self.job_role_permissions:
            return self
        job_roles = {k: v for k, v in self.job_role_permissions.items() if k != key}
        return PermissionRegistry(
            version=self.version,
            role_permissions=self.role_permissions,
            job_role_permissions=job_roles,
            revision=self.revision + 1,
        )


DEFAULT_REGISTRY = PermissionRegistry.default()
