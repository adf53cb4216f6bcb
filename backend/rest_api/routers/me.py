"""
Endpoints describing the current principal: permissions, location switcher
options, navigation, and validation of a location selection.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import get_db
from shared.utils.exceptions import ValidationError
from shared.utils.schemas import (
    LocationOptionsOutput,
    LocationOutput,
    LocationSelectRequest,
    LocationSelectResponse,
    NavigationOutput,
    PermissionsOutput,
)
from rest_api.repositories import get_location_repository
from rest_api.routers._common import get_permission_context
from rest_api.routers.locations import VIRTUAL_LOCATION_NAMES
from rest_api.services.permissions import ALL, LocationRef, PermissionContext


router = APIRouter(prefix="/me", tags=["me"])


@router.get("/permissions", response_model=PermissionsOutput)
def my_permissions(ctx: PermissionContext = Depends(get_permission_context)) -> PermissionsOutput:
    permissions = ctx.permissions
    return PermissionsOutput(
        principal_id=ctx.principal.id,
        role=ctx.principal.role.value,
        job_role=ctx.principal.job_role,
        wildcard=permissions.is_wildcard,
        permissions=permissions.sorted_tokens(),
        registry_version=ctx.gate.registry_label,
    )


@router.get("/locations", response_model=LocationOptionsOutput)
def my_locations(
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(get_permission_context),
) -> LocationOptionsOutput:
    """Location switcher options in display order and the initial selection."""
    names = {r.id: r for r in get_location_repository(db).list_records()}

    options: list[LocationOutput] = []
    for ref in ctx.selectable_locations():
        if ref == ALL:
            options.append(LocationOutput(id=str(ref), name="All Locations", kind="all"))
        elif ref in VIRTUAL_LOCATION_NAMES:
            options.append(
                LocationOutput(id=str(ref), name=VIRTUAL_LOCATION_NAMES[ref], kind=ref.kind.value)
            )
        else:
            record = names.get(ref.location_id or "")
            options.append(
                LocationOutput(
                    id=str(ref),
                    name=record.name if record else str(ref),
                    address=record.address if record else None,
                    city=record.city if record else None,
                )
            )

    default = ctx.default_location()
    return LocationOptionsOutput(
        options=options,
        default=str(default) if default else None,
        grant=ctx.grant.to_wire(),
    )


@router.get("/navigation", response_model=NavigationOutput)
def my_navigation(ctx: PermissionContext = Depends(get_permission_context)) -> NavigationOutput:
    return NavigationOutput(
        routes=ctx.accessible_routes(),
        landing_page=ctx.first_accessible_page(),
    )


@router.post("/location", response_model=LocationSelectResponse)
def select_location(
    body: LocationSelectRequest,
    ctx: PermissionContext = Depends(get_permission_context),
) -> LocationSelectResponse:
    """Validate a location switch. Reserved lenses are admin-only (403)."""
    try:
        ref = LocationRef.parse(body.location)
    except ValueError:
        raise ValidationError("Invalid location", location=body.location)

    ctx.require_selectable(ref)
    logger.info("Location selected", location=str(ref), role=ctx.principal.role.value)
    return LocationSelectResponse(location=str(ref), kind=ref.kind.value)
