"""
Staff endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.constants import Permissions
from shared.infrastructure.db import get_db
from shared.utils.exceptions import NotFoundError
from shared.utils.schemas import StaffOutput
from rest_api.repositories import StaffFilters, get_staff_repository
from rest_api.routers._common import (
    get_permission_context,
    parse_location_query,
    require_permission,
)
from rest_api.services.permissions import PermissionContext, StaffMember


router = APIRouter(prefix="/staff", tags=["staff"])


def staff_output(member: StaffMember) -> StaffOutput:
    return StaffOutput(
        id=member.id,
        name=member.name,
        job_role=member.job_role,
        locations=sorted(str(ref) for ref in member.locations),
        home_service=member.offers_home_service,
    )


@router.get("", response_model=list[StaffOutput])
def list_staff(
    location: str | None = None,
    bookable_only: bool = False,
    search: str | None = None,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(require_permission(Permissions.VIEW_STAFF)),
) -> list[StaffOutput]:
    """List staff visible at the requested location (default: all).

    An unknown location id yields an empty list.
    """
    query = parse_location_query(location)
    members = get_staff_repository(db).list_members(
        StaffFilters(bookable_only=bookable_only, search=search)
    )
    return [staff_output(m) for m in ctx.visible(members, query)]


@router.get("/{staff_id}", response_model=StaffOutput)
def get_staff_member(
    staff_id: str,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(get_permission_context),
) -> StaffOutput:
    """A single staff record: management sees anyone, others only themselves."""
    ctx.require_staff_record_access(staff_id)
    member = get_staff_repository(db).get_member(staff_id)
    if member is None:
        raise NotFoundError("Staff member", staff_id)
    return staff_output(member)
