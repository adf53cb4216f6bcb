"""
Centralized constants for the backend application.
Avoids magic strings for roles, job roles, permission tokens and location tags.

Usage:
    from shared.config.constants import Role, Permissions, LocationTag

    if principal.role in ADMIN_ROLES:
        ...

    if ref_value == LocationTag.HOME:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Access Roles
# =============================================================================


class Role(str, Enum):
    """Coarse access role carried by every principal (closed set)."""

    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"  # Alias of ADMIN
    MANAGER = "MANAGER"
    STAFF = "STAFF"
    CLIENT = "CLIENT"
    RECEPTIONIST = "RECEPTIONIST"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Parse a role string case-insensitively. Raises ValueError when unknown."""
        if isinstance(value, Role):
            return value
        normalized = str(value).strip().upper().replace("-", "_")
        return cls(normalized)


# Role groups for common access patterns
ADMIN_ROLES: Final[frozenset[Role]] = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
MANAGEMENT_ROLES: Final[frozenset[Role]] = frozenset({Role.ADMIN, Role.SUPER_ADMIN, Role.MANAGER})


# =============================================================================
# Job Roles (business-configurable occupation tags)
# =============================================================================


class JobRoles:
    """Known job-role strings. Job roles are open: anything else is allowed."""

    SUPER_ADMIN: Final[str] = "super_admin"
    ORG_ADMIN: Final[str] = "org_admin"
    ADMIN: Final[str] = "admin"
    LOCATION_MANAGER: Final[str] = "location_manager"
    MANAGER: Final[str] = "manager"
    RECEPTIONIST: Final[str] = "receptionist"
    ONLINE_STORE_RECEPTIONIST: Final[str] = "online_store_receptionist"
    STAFF: Final[str] = "staff"
    STYLIST: Final[str] = "stylist"
    COLORIST: Final[str] = "colorist"
    BARBER: Final[str] = "barber"
    NAIL_TECHNICIAN: Final[str] = "nail_technician"
    ESTHETICIAN: Final[str] = "esthetician"
    PEDICURIST: Final[str] = "pedicurist"
    CLIENT: Final[str] = "client"


RECEPTIONIST_JOB_ROLES: Final[frozenset[str]] = frozenset({
    JobRoles.RECEPTIONIST,
    JobRoles.ONLINE_STORE_RECEPTIONIST,
})

# Job role -> coarse role assigned when a staff account is created
JOB_ROLE_TO_ROLE: Final[dict[str, Role]] = {
    JobRoles.SUPER_ADMIN: Role.ADMIN,
    JobRoles.ORG_ADMIN: Role.ADMIN,
    JobRoles.LOCATION_MANAGER: Role.MANAGER,
    JobRoles.MANAGER: Role.MANAGER,
    JobRoles.STYLIST: Role.STAFF,
    JobRoles.COLORIST: Role.STAFF,
    JobRoles.BARBER: Role.STAFF,
    JobRoles.NAIL_TECHNICIAN: Role.STAFF,
    JobRoles.ESTHETICIAN: Role.STAFF,
    JobRoles.PEDICURIST: Role.STAFF,
    JobRoles.RECEPTIONIST: Role.STAFF,
    JobRoles.ONLINE_STORE_RECEPTIONIST: Role.STAFF,
    JobRoles.STAFF: Role.STAFF,
    JobRoles.CLIENT: Role.CLIENT,
}

# Job roles that never get a column on the appointment calendar
NON_BOOKABLE_JOB_ROLES: Final[frozenset[str]] = frozenset({
    JobRoles.SUPER_ADMIN,
    JobRoles.ORG_ADMIN,
    JobRoles.ADMIN,
}) | RECEPTIONIST_JOB_ROLES


def normalize_job_role(job_role: str | None) -> str | None:
    """Lower-case and trim a job role; blank values become None."""
    if job_role is None:
        return None
    normalized = job_role.strip().lower().replace("-", "_").replace(" ", "_")
    return normalized or None


def role_for_job_role(job_role: str | None) -> Role:
    """Map a job role to its coarse access role (unknown job roles map to STAFF)."""
    normalized = normalize_job_role(job_role)
    if normalized is None:
        return Role.STAFF
    return JOB_ROLE_TO_ROLE.get(normalized, Role.STAFF)


# =============================================================================
# Location Tags
# =============================================================================


class LocationTag:
    """Wire values of the reserved (non-physical) location tags."""

    ALL: Final[str] = "all"
    HOME: Final[str] = "home"
    ONLINE: Final[str] = "online"

    RESERVED: Final[frozenset[str]] = frozenset({ALL, HOME, ONLINE})


# =============================================================================
# Permission Tokens
# =============================================================================


class Permissions:
    """Atomic permission tokens. ALL is the wildcard granting every token."""

    ALL: Final[str] = "all"

    # Dashboard
    VIEW_DASHBOARD: Final[str] = "view_dashboard"

    # Appointments
    VIEW_APPOINTMENTS: Final[str] = "view_appointments"
    CREATE_APPOINTMENT: Final[str] = "create_appointment"
    EDIT_APPOINTMENT: Final[str] = "edit_appointment"
    DELETE_APPOINTMENT: Final[str] = "delete_appointment"
    VIEW_OWN_APPOINTMENTS: Final[str] = "view_own_appointments"
    EDIT_OWN_APPOINTMENTS: Final[str] = "edit_own_appointments"

    # Clients
    VIEW_CLIENTS: Final[str] = "view_clients"
    CREATE_CLIENT: Final[str] = "create_client"
    EDIT_CLIENT: Final[str] = "edit_client"
    DELETE_CLIENT: Final[str] = "delete_client"
    VIEW_OWN_CLIENTS: Final[str] = "view_own_clients"

    # Services
    VIEW_SERVICES: Final[str] = "view_services"
    CREATE_SERVICE: Final[str] = "create_service"
    EDIT_SERVICE: Final[str] = "edit_service"
    DELETE_SERVICE: Final[str] = "delete_service"

    # Staff
    VIEW_STAFF: Final[str] = "view_staff"
    CREATE_STAFF: Final[str] = "create_staff"
    EDIT_STAFF: Final[str] = "edit_staff"
    DELETE_STAFF: Final[str] = "delete_staff"
    VIEW_STAFF_SCHEDULE: Final[str] = "view_staff_schedule"
    EDIT_STAFF_SCHEDULE: Final[str] = "edit_staff_schedule"
    VIEW_OWN_SCHEDULE: Final[str] = "view_own_schedule"
    EDIT_OWN_SCHEDULE: Final[str] = "edit_own_schedule"

    # Inventory
    VIEW_INVENTORY: Final[str] = "view_inventory"
    CREATE_INVENTORY: Final[str] = "create_inventory"
    EDIT_INVENTORY: Final[str] = "edit_inventory"
    DELETE_INVENTORY: Final[str] = "delete_inventory"
    TRANSFER_INVENTORY: Final[str] = "transfer_inventory"

    # Point of sale
    VIEW_POS: Final[str] = "view_pos"
    CREATE_SALE: Final[str] = "create_sale"
    EDIT_SALE: Final[str] = "edit_sale"
    DELETE_SALE: Final[str] = "delete_sale"
    APPLY_DISCOUNT: Final[str] = "apply_discount"
    ISSUE_REFUND: Final[str] = "issue_refund"

    # Accounting / HR / Reports
    VIEW_ACCOUNTING: Final[str] = "view_accounting"
    MANAGE_ACCOUNTING: Final[str] = "manage_accounting"
    VIEW_HR: Final[str] = "view_hr"
    MANAGE_HR: Final[str] = "manage_hr"
    VIEW_REPORTS: Final[str] = "view_reports"
    EXPORT_REPORTS: Final[str] = "export_reports"

    # Company documents
    VIEW_COMPANY_DOCUMENTS: Final[str] = "view_company_documents"
    MANAGE_COMPANY_DOCUMENTS: Final[str] = "manage_company_documents"

    # Settings
    VIEW_SETTINGS: Final[str] = "view_settings"
    EDIT_SETTINGS: Final[str] = "edit_settings"
    MANAGE_USERS: Final[str] = "manage_users"
    MANAGE_ROLES: Final[str] = "manage_roles"
    MANAGE_LOCATIONS: Final[str] = "manage_locations"

    # Client portal
    VIEW_CLIENT_PORTAL: Final[str] = "view_client_portal"
    MANAGE_CLIENT_PORTAL: Final[str] = "manage_client_portal"

    # Chat
    VIEW_CHAT: Final[str] = "view_chat"
    SEND_MESSAGES: Final[str] = "send_messages"
    CREATE_CHANNELS: Final[str] = "create_channels"
    MANAGE_CHANNELS: Final[str] = "manage_channels"
    MODERATE_CHAT: Final[str] = "moderate_chat"
    VIEW_ALL_CHANNELS: Final[str] = "view_all_channels"
    SEND_PRODUCT_REQUESTS: Final[str] = "send_product_requests"
    SEND_HELP_REQUESTS: Final[str] = "send_help_requests"

    # Loyalty program
    VIEW_LOYALTY: Final[str] = "view_loyalty"
    MANAGE_LOYALTY: Final[str] = "manage_loyalty"
    CREATE_REWARD: Final[str] = "create_reward"
    EDIT_REWARD: Final[str] = "edit_reward"
    DELETE_REWARD: Final[str] = "delete_reward"
    MANAGE_LOYALTY_TIERS: Final[str] = "manage_loyalty_tiers"
    ADJUST_LOYALTY_POINTS: Final[str] = "adjust_loyalty_points"

    # Gift cards
    VIEW_GIFT_CARDS: Final[str] = "view_gift_cards"
    CREATE_GIFT_CARD: Final[str] = "create_gift_card"
    EDIT_GIFT_CARD: Final[str] = "edit_gift_card"
    DELETE_GIFT_CARD: Final[str] = "delete_gift_card"
    REDEEM_GIFT_CARD: Final[str] = "redeem_gift_card"
    REFUND_GIFT_CARD: Final[str] = "refund_gift_card"
    MANAGE_GIFT_CARD_SETTINGS: Final[str] = "manage_gift_card_settings"

    # Memberships
    VIEW_MEMBERSHIPS: Final[str] = "view_memberships"
    CREATE_MEMBERSHIP: Final[str] = "create_membership"
    EDIT_MEMBERSHIP: Final[str] = "edit_membership"
    DELETE_MEMBERSHIP: Final[str] = "delete_membership"
    CANCEL_MEMBERSHIP: Final[str] = "cancel_membership"
    RENEW_MEMBERSHIP: Final[str] = "renew_membership"
    MANAGE_MEMBERSHIP_TIERS: Final[str] = "manage_membership_tiers"
    MANAGE_MEMBERSHIP_SETTINGS: Final[str] = "manage_membership_settings"

    @classmethod
    def all_tokens(cls) -> frozenset[str]:
        """Every concrete token (the wildcard excluded)."""
        return frozenset(
            value
            for name, value in vars(cls).items()
            if name.isupper() and isinstance(value, str) and value != cls.ALL
        )


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_ADDRESS_LENGTH: Final[int] = 500
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100
    MAX_ID_LENGTH: Final[int] = 64


# =============================================================================
# Error Messages
# =============================================================================


class ErrorMessages:
    """Standardized error messages."""

    NOT_AUTHENTICATED: Final[str] = "Not authenticated"
    INSUFFICIENT_PERMISSIONS: Final[str] = "Insufficient permissions"
    NO_LOCATION_ACCESS: Final[str] = "You do not have access to this location"
    RESERVED_LOCATION: Final[str] = "Only administrators can select this location"
    PERMISSION_SOURCE_UNAVAILABLE: Final[str] = "Role configuration is temporarily unavailable"
