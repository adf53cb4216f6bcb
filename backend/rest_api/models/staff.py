"""
Staff models: StaffMember, StaffLocation.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base


class StaffMember(AuditMixin, Base):
    """
    A salon employee. The id matches the principal id issued by the
    authentication provider for the same person.
    """

    __tablename__ = "staff_member"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text)
    # Coarse access role (ADMIN, MANAGER, STAFF, ...)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="STAFF")
    job_role: Mapped[Optional[str]] = mapped_column(String(64))
    home_service: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    assignments: Mapped[list["StaffLocation"]] = relationship(
        back_populates="staff", cascade="all, delete-orphan", lazy="selectin"
    )

    @property
    def location_tags(self) -> list[str]:
        return [a.location_tag for a in self.assignments]


class StaffLocation(Base):
    """Assignment of a staff member to a location tag ("loc1", "home", ...)."""

    __tablename__ = "staff_location"
    __table_args__ = (UniqueConstraint("staff_id", "location_tag", name="uq_staff_location"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    staff_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("staff_member.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_tag: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    staff: Mapped["StaffMember"] = relationship(back_populates="assignments")
