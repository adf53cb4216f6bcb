"""
Staff Repository - staff members with their location assignments.
"""

from dataclasses import dataclass

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from shared.config.constants import NON_BOOKABLE_JOB_ROLES
from rest_api.models import StaffMember as StaffRow
from rest_api.services.permissions.models import StaffMember, parse_location_refs
from .base import BaseRepository, RepositoryFilters


def to_staff_member(row: StaffRow) -> StaffMember:
    return StaffMember(
        id=row.id,
        name=row.name,
        locations=parse_location_refs(row.location_tags),
        offers_home_service=row.home_service,
        job_role=row.job_role,
    )


@dataclass
class StaffFilters(RepositoryFilters):
    """Filters specific to staff."""

    # Only staff that take bookings (calendar columns)
    bookable_only: bool = False


class StaffRepository(BaseRepository[StaffRow]):
    """
    Repository for StaffMember rows.

    Guarantees eager loading of:
    - location assignments
    """

    @property
    def model(self) -> type[StaffRow]:
        return StaffRow

    def _base_query(self) -> Select:
        return (
            select(StaffRow)
            .options(selectinload(StaffRow.assignments))
            .order_by(StaffRow.name, StaffRow.id)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        query = super()._apply_filters(query, filters)
        if isinstance(filters, StaffFilters) and filters.bookable_only:
            query = query.where(
                (StaffRow.job_role.is_(None)) | (StaffRow.job_role.not_in(sorted(NON_BOOKABLE_JOB_ROLES)))
            )
        return query

    def list_members(self, filters: StaffFilters | None = None) -> list[StaffMember]:
        return [to_staff_member(row) for row in self.find_all(filters)]

    def get_member(self, staff_id: str) -> StaffMember | None:
        row = self.find_by_id(staff_id)
        return to_staff_member(row) if row else None


def get_staff_repository(db: Session) -> StaffRepository:
    return StaffRepository(db)
