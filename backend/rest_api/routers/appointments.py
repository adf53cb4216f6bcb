"""
Appointment endpoints.

Principals with view_appointments get the calendar for the requested
location, including cross-location blocks for home-service stylists.
Principals limited to view_own_appointments get their own bookings only.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.constants import Permissions
from shared.infrastructure.db import get_db
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import AppointmentOutput
from rest_api.repositories import AppointmentFilters, get_appointment_repository
from rest_api.routers._common import parse_location_query, require_any_permission
from rest_api.services.permissions import Appointment, PermissionContext, Visibility


router = APIRouter(prefix="/appointments", tags=["appointments"])


def appointment_output(item: Visibility[Appointment]) -> AppointmentOutput:
    appointment = item.resource
    return AppointmentOutput(
        id=appointment.id,
        location=str(appointment.location),
        staff_id=appointment.staff_id,
        staff_name=appointment.staff.name if appointment.staff else None,
        client_name=appointment.client_name,
        service_name=appointment.service_name,
        starts_at=appointment.starts_at,
        cross_location_blocking=item.cross_location,
    )


@router.get("", response_model=list[AppointmentOutput])
def list_appointments(
    location: str | None = None,
    starts_from: datetime | None = None,
    starts_until: datetime | None = None,
    staff_id: str | None = None,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(
        require_any_permission(Permissions.VIEW_APPOINTMENTS, Permissions.VIEW_OWN_APPOINTMENTS)
    ),
) -> list[AppointmentOutput]:
    if starts_from and starts_until and starts_until <= starts_from:
        raise ValidationError("starts_until must be after starts_from")

    query = parse_location_query(location)
    appointments = get_appointment_repository(db).list_appointments(
        AppointmentFilters(starts_from=starts_from, starts_until=starts_until, staff_id=staff_id)
    )
    return [appointment_output(item) for item in ctx.visible_appointments(appointments, query)]
