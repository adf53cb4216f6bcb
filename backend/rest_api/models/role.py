"""
CustomRole model: business-configured permission overrides per role.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base


class CustomRole(AuditMixin, Base):
    """
    Permission list that replaces the built-in table for a role.

    role_id is matched case-insensitively; an empty list means "no override".
    """

    __tablename__ = "custom_role"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    role_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    name: Mapped[Optional[str]] = mapped_column(Text)
    permissions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    def __repr__(self) -> str:
        return f"<CustomRole(role_id={self.role_id!r}, permissions={len(self.permissions or [])})>"
