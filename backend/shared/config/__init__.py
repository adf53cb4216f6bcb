"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, DATABASE_URL
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Role,
    JobRoles,
    LocationTag,
    Permissions,
    Limits,
    ADMIN_ROLES,
    MANAGEMENT_ROLES,
)

__all__ = [
    # settings
    "settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Role",
    "JobRoles",
    "LocationTag",
    "Permissions",
    "Limits",
    "ADMIN_ROLES",
    "MANAGEMENT_ROLES",
]
