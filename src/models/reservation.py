"""
SQLAlchemy models for the reservations table.
Corresponds to migration 002_create_reservations.sql.
"""

import uuid
from datetime import date
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("checkout_date > checkin_date", name="ck_reservation_span_positive"),
        Index("ix_reservations_property_checkin", "property_id", "checkin_date"),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Stay span; checkout is exclusive of the night of checkout
    checkin_date: Mapped[date] = mapped_column(Date, nullable=False)
    checkout_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Guest / channel metadata
    guest_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="reservations")

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, property={self.property_id}, "
            f"{self.checkin_date} -> {self.checkout_date})>"
        )
