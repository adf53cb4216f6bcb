"""
Location Repository - branches and the location registry adapter.
"""

from typing import Callable

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from rest_api.models import Location
from rest_api.services.permissions.models import LocationRecord
from .base import BaseRepository


def to_location_record(row: Location) -> LocationRecord:
    return LocationRecord(
        id=row.id,
        name=row.name,
        address=row.address,
        city=row.city,
        is_active=row.is_active,
    )


class LocationRepository(BaseRepository[Location]):
    @property
    def model(self) -> type[Location]:
        return Location

    def _base_query(self) -> Select:
        return select(Location).order_by(Location.name, Location.id)

    def list_records(self) -> list[LocationRecord]:
        return [to_location_record(row) for row in self.find_all()]

    def active_ids(self) -> frozenset[str]:
        rows = self._db.execute(select(Location.id).where(Location.is_active.is_(True)))
        return frozenset(rows.scalars().all())


def get_location_repository(db: Session) -> LocationRepository:
    return LocationRepository(db)


class DbLocationRegistry:
    """
    LocationRegistry backed by the location table.

    Opens its own short-lived session so it can be shared process-wide
    behind CachedLocationRegistry.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_active_physical_locations(self) -> frozenset[str]:
        with self._session_factory() as db:
            return LocationRepository(db).active_ids()
