"""
Scheduling models: Service, ServiceLocation, Appointment.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base
from .staff import StaffMember


class Service(AuditMixin, Base):
    __tablename__ = "service"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(Text)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    offerings: Mapped[list["ServiceLocation"]] = relationship(
        back_populates="service", cascade="all, delete-orphan", lazy="selectin"
    )

    @property
    def location_tags(self) -> list[str]:
        return [o.location_tag for o in self.offerings]


class ServiceLocation(Base):
    """Where a service is offered: a branch id or the "home"/"online" tag."""

    __tablename__ = "service_location"
    __table_args__ = (UniqueConstraint("service_id", "location_tag", name="uq_service_location"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    service_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("service.id", ondelete="CASCADE"), nullable=False, index=True
    )
    location_tag: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    service: Mapped["Service"] = relationship(back_populates="offerings")


class Appointment(AuditMixin, Base):
    """A booking at exactly one location tag (branch id, "home" or "online")."""

    __tablename__ = "appointment"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    location_tag: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    staff_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("staff_member.id"), index=True
    )
    client_name: Mapped[Optional[str]] = mapped_column(Text)
    service_name: Mapped[Optional[str]] = mapped_column(Text)
    starts_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)

    staff: Mapped[Optional[StaffMember]] = relationship(lazy="joined")
