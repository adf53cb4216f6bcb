"""
Base Repository implementation.
Provides common data access patterns with soft-delete filtering.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Soft delete
    include_deleted: bool = False

    # Case-insensitive name search
    search: str | None = None

    def __post_init__(self):
        """Validate and normalize filters."""
        if self.search:
            self.search = self.search.strip()[:Limits.MAX_SEARCH_TERM_LENGTH] or None


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: the SQLAlchemy model class
    - _base_query(): base query with eager loading

    Listings are never paginated here: visibility filtering runs on the
    full result set after loading.
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """Return base query with proper eager loading."""
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        if filters.search and hasattr(self.model, "name"):
            query = query.where(self.model.name.ilike(f"%{filters.search}%"))
        return query

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        filters = filters or RepositoryFilters()
        query = self._base_query()

        if not filters.include_deleted and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))

        query = self._apply_filters(query, filters)
        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: str, include_deleted: bool = False) -> ModelT | None:
        query = self._base_query().where(self.model.id == entity_id)

        if not include_deleted and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))

        return self._db.execute(query).scalars().unique().one_or_none()

    def exists(self, entity_id: str) -> bool:
        """Check if an entity with this id exists (deleted rows included)."""
        query = select(func.count()).select_from(self.model).where(self.model.id == entity_id)
        return (self._db.scalar(query) or 0) > 0
