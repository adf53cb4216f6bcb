"""
Repository Pattern implementation.
Centralizes data access and converts rows into the access-control value types.

Usage:
    from rest_api.repositories import get_staff_repository

    repo = get_staff_repository(db)
    members = repo.list_members()
"""

from .base import BaseRepository, RepositoryFilters
from .location import (
    DbLocationRegistry,
    LocationRepository,
    get_location_repository,
    to_location_record,
)
from .staff import StaffFilters, StaffRepository, get_staff_repository, to_staff_member
from .scheduling import (
    AppointmentFilters,
    AppointmentRepository,
    ServiceRepository,
    get_appointment_repository,
    get_service_repository,
    to_appointment,
    to_service,
)
from .role import CustomRoleRepository, DbCustomRoleSource

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Locations
    "LocationRepository",
    "DbLocationRegistry",
    "get_location_repository",
    "to_location_record",
    # Staff
    "StaffRepository",
    "StaffFilters",
    "get_staff_repository",
    "to_staff_member",
    # Scheduling
    "ServiceRepository",
    "AppointmentRepository",
    "AppointmentFilters",
    "get_service_repository",
    "get_appointment_repository",
    "to_service",
    "to_appointment",
    # Custom roles
    "CustomRoleRepository",
    "DbCustomRoleSource",
]
