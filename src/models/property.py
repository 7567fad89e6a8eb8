"""
SQLAlchemy models for the properties table.
Corresponds to migration 001_create_properties.sql.
"""

import uuid
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "properties"

    # Owning account (managed by the external auth/billing system)
    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    pricing_config: Mapped[Optional["PropertyPricingConfig"]] = relationship(
        "PropertyPricingConfig", back_populates="property", uselist=False
    )
    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="property"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"
