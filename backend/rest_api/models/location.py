"""
Location model: physical branches.

Home service and the online store are reserved tags, not rows.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class Location(AuditMixin, Base):
    """
    A physical branch. Active rows are the canonical set of valid location ids.
    Inherits: is_active, created_at, updated_at, deleted_at from AuditMixin.
    """

    __tablename__ = "location"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Location(id={self.id!r}, name={self.name!r})>"
