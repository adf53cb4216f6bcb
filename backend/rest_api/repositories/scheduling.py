"""
Scheduling Repositories - services and appointments.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, joinedload, selectinload

from rest_api.models import Appointment as AppointmentRow
from rest_api.models import Service as ServiceRow
from rest_api.models import StaffMember as StaffRow
from rest_api.services.permissions.models import (
    Appointment,
    LocationRef,
    Service,
    parse_location_refs,
)
from .base import BaseRepository, RepositoryFilters
from .staff import to_staff_member


def to_service(row: ServiceRow) -> Service:
    return Service(id=row.id, name=row.name, locations=parse_location_refs(row.location_tags))


def to_appointment(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=row.id,
        location=LocationRef.parse(row.location_tag),
        staff=to_staff_member(row.staff) if row.staff is not None else None,
        client_name=row.client_name,
        service_name=row.service_name,
        starts_at=row.starts_at,
    )


class ServiceRepository(BaseRepository[ServiceRow]):
    @property
    def model(self) -> type[ServiceRow]:
        return ServiceRow

    def _base_query(self) -> Select:
        return (
            select(ServiceRow)
            .options(selectinload(ServiceRow.offerings))
            .order_by(ServiceRow.name, ServiceRow.id)
        )

    def list_services(self, filters: RepositoryFilters | None = None) -> list[Service]:
        return [to_service(row) for row in self.find_all(filters)]


@dataclass
class AppointmentFilters(RepositoryFilters):
    """Filters specific to appointments."""

    starts_from: datetime | None = None
    starts_until: datetime | None = None
    staff_id: str | None = None


class AppointmentRepository(BaseRepository[AppointmentRow]):
    """
    Repository for Appointment rows.

    Guarantees eager loading of:
    - staff member and the staff member's location assignments
    """

    @property
    def model(self) -> type[AppointmentRow]:
        return AppointmentRow

    def _base_query(self) -> Select:
        return (
            select(AppointmentRow)
            .options(
                joinedload(AppointmentRow.staff).selectinload(StaffRow.assignments)
            )
            .order_by(AppointmentRow.starts_at, AppointmentRow.id)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, AppointmentFilters):
            return query
        if filters.starts_from is not None:
            query = query.where(AppointmentRow.starts_at >= filters.starts_from)
        if filters.starts_until is not None:
            query = query.where(AppointmentRow.starts_at < filters.starts_until)
        if filters.staff_id:
            query = query.where(AppointmentRow.staff_id == filters.staff_id)
        return query

    def list_appointments(self, filters: AppointmentFilters | None = None) -> list[Appointment]:
        return [to_appointment(row) for row in self.find_all(filters)]


def get_service_repository(db: Session) -> ServiceRepository:
    return ServiceRepository(db)


def get_appointment_repository(db: Session) -> AppointmentRepository:
    return AppointmentRepository(db)
