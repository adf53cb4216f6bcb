"""
Custom Role Repository and the override-source adapter.
"""

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from rest_api.models import CustomRole
from rest_api.services.permissions.models import PermissionSet
from .base import BaseRepository


class CustomRoleRepository(BaseRepository[CustomRole]):
    @property
    def model(self) -> type[CustomRole]:
        return CustomRole

    def _base_query(self) -> Select:
        return select(CustomRole).order_by(CustomRole.role_id)

    def find_by_role_id(self, role_id: str) -> CustomRole | None:
        """Exact match first, then case-insensitive."""
        active = CustomRole.is_active.is_(True)
        row = self._db.scalar(select(CustomRole).where(CustomRole.role_id == role_id, active))
        if row is not None:
            return row
        return self._db.scalar(
            select(CustomRole)
            .where(func.lower(CustomRole.role_id) == role_id.lower(), active)
            .order_by(CustomRole.id)
            .limit(1)
        )


class DbCustomRoleSource:
    """CustomRoleSource backed by the custom_role table, bound to one session."""

    def __init__(self, db: Session):
        self._repo = CustomRoleRepository(db)

    def lookup_role_permissions(self, role_id: str) -> PermissionSet | None:
        row = self._repo.find_by_role_id(role_id)
        if row is None:
            return None
        return PermissionSet.of(*(row.permissions or []))
