"""
Service catalog endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.constants import Permissions
from shared.infrastructure.db import get_db
from shared.utils.schemas import ServiceOutput
from rest_api.repositories import RepositoryFilters, get_service_repository
from rest_api.routers._common import parse_location_query, require_permission
from rest_api.services.permissions import PermissionContext


router = APIRouter(prefix="/services", tags=["services"])


@router.get("", response_model=list[ServiceOutput])
def list_services(
    location: str | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    ctx: PermissionContext = Depends(require_permission(Permissions.VIEW_SERVICES)),
) -> list[ServiceOutput]:
    query = parse_location_query(location)
    services = get_service_repository(db).list_services(RepositoryFilters(search=search))
    return [
        ServiceOutput(
            id=s.id,
            name=s.name,
            locations=sorted(str(ref) for ref in s.locations),
        )
        for s in ctx.visible(services, query)
    ]
