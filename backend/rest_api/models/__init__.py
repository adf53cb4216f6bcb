"""
SQLAlchemy ORM Models Package.

- base: Base class and AuditMixin
- location: Location (physical branches)
- staff: StaffMember, StaffLocation
- scheduling: Service, ServiceLocation, Appointment
- role: CustomRole
"""

from .base import Base, AuditMixin
from .location import Location
from .staff import StaffMember, StaffLocation
from .scheduling import Service, ServiceLocation, Appointment
from .role import CustomRole

__all__ = [
    "Base",
    "AuditMixin",
    "Location",
    "StaffMember",
    "StaffLocation",
    "Service",
    "ServiceLocation",
    "Appointment",
    "CustomRole",
]
