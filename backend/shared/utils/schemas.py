"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.config.constants import Limits, LocationTag


# =============================================================================
# Common Types
# =============================================================================

RoleName = Literal["ADMIN", "SUPER_ADMIN", "MANAGER", "STAFF", "CLIENT", "RECEPTIONIST"]
LocationKindName = Literal["physical", "home", "online", "all"]


# =============================================================================
# Location Schemas
# =============================================================================


class LocationOutput(BaseModel):
    """A branch or, for admins, a reserved lens."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    kind: LocationKindName = "physical"
    address: str | None = None
    city: str | None = None


class LocationCreate(BaseModel):
    id: str = Field(min_length=1, max_length=Limits.MAX_ID_LENGTH, pattern=r"^[A-Za-z0-9_\-]+$")
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    address: str | None = Field(default=None, max_length=Limits.MAX_ADDRESS_LENGTH)
    city: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    phone: str | None = Field(default=None, max_length=50)

    @field_validator("id")
    @classmethod
    def id_not_reserved(cls, value: str) -> str:
        if value.lower() in LocationTag.RESERVED:
            raise ValueError(f"'{value}' is a reserved location tag")
        return value


# =============================================================================
# Staff / Service / Appointment Schemas
# =============================================================================


class StaffOutput(BaseModel):
    id: str
    name: str
    job_role: str | None = None
    locations: list[str]
    home_service: bool = False


class ServiceOutput(BaseModel):
    id: str
    name: str
    locations: list[str]


class AppointmentOutput(BaseModel):
    id: str
    location: str
    staff_id: str | None = None
    staff_name: str | None = None
    client_name: str | None = None
    service_name: str | None = None
    starts_at: datetime | None = None
    # Shown only to block the stylist's slot, not booked at the queried location
    cross_location_blocking: bool = False


# =============================================================================
# Principal ("me") Schemas
# =============================================================================


class PermissionsOutput(BaseModel):
    principal_id: str
    role: RoleName
    job_role: str | None = None
    wildcard: bool
    permissions: list[str]
    registry_version: str


class LocationOptionsOutput(BaseModel):
    """Location switcher: options offered to the principal and the initial pick."""

    options: list[LocationOutput]
    default: str | None = None
    grant: list[str]


class NavigationOutput(BaseModel):
    routes: list[str]
    landing_page: str


class LocationSelectRequest(BaseModel):
    location: str = Field(min_length=1, max_length=Limits.MAX_ID_LENGTH)


class LocationSelectResponse(BaseModel):
    location: str
    kind: LocationKindName


# =============================================================================
# Health
# =============================================================================


class HealthOutput(BaseModel):
    status: Literal["ok", "degraded"]
    database: Literal["ok", "error"]
    version: str
