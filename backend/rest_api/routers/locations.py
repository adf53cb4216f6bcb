"""
Location endpoints.

Listing is filtered by the principal's grant. Mutations invalidate the
cached location registry explicitly so grant validation sees them at once.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shared.config.constants import Permissions
from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.exceptions import ConflictError, NotFoundError
from shared.utils.schemas import LocationCreate, LocationOutput
from rest_api.models import Location
from rest_api.repositories import get_location_repository
from rest_api.routers._common import (
    get_location_registry,
    get_permission_context,
    require_permission,
)
from rest_api.services.permissions import (
    ALL,
    HOME,
    ONLINE,
    CachedLocationRegistry,
    LocationRecord,
    PermissionContext,
)


router = APIRouter(prefix="/locations", tags=["locations"])

VIRTUAL_LOCATION_NAMES = {HOME: "Home Service", ONLINE: "Online Store"}


def location_output(record: LocationRecord) -> LocationOutput:
    return LocationOutput(
        id=record.id,
        name=record.name,
        kind="physical",
        address=record.address,
        city=record.city,
    )


@router.get("", response_model=list[LocationOutput])
def list_locations(
    include_virtual: bool = False,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(get_permission_context),
) -> list[LocationOutput]:
    """List branches the principal can see.

    Admins may also ask for the home-service and online-store lenses.
    """
    records = get_location_repository(db).list_records()
    result = [location_output(r) for r in ctx.visible(records, ALL)]

    if include_virtual and ctx.is_admin:
        for ref, name in VIRTUAL_LOCATION_NAMES.items():
            result.append(LocationOutput(id=str(ref), name=name, kind=ref.kind.value))
    return result


@router.post("", response_model=LocationOutput, status_code=status.HTTP_201_CREATED)
def create_location(
    body: LocationCreate,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(require_permission(Permissions.MANAGE_LOCATIONS)),
    registry: CachedLocationRegistry = Depends(get_location_registry),
) -> LocationOutput:
    repo = get_location_repository(db)
    if repo.exists(body.id):
        raise ConflictError("A location with this ID already exists", location_id=body.id)

    location = Location(**body.model_dump())
    location.created_by_id = ctx.principal.id
    db.add(location)
    safe_commit(db)
    db.refresh(location)
    registry.invalidate()

    logger.info("Location created", location_id=location.id)
    return LocationOutput(
        id=location.id,
        name=location.name,
        address=location.address,
        city=location.city,
    )


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_location(
    location_id: str,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(require_permission(Permissions.MANAGE_LOCATIONS)),
    registry: CachedLocationRegistry = Depends(get_location_registry),
) -> Response:
    """Soft delete a branch. Grants naming it stop matching immediately."""
    location = get_location_repository(db).find_by_id(location_id)
    if location is None:
        raise NotFoundError("Location", location_id)

    location.soft_delete(ctx.principal.id)
    safe_commit(db)
    registry.invalidate()

    logger.info("Location deleted", location_id=location_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
