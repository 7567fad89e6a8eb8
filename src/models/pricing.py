"""
SQLAlchemy models for property_pricing_configs and monthly_cost_events.
Corresponds to migration 003_create_pricing.sql.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PropertyPricingConfig(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "property_pricing_configs"
    __table_args__ = (
        CheckConstraint("holiday_multiplier > 0", name="ck_pricing_holiday_multiplier_positive"),
        CheckConstraint(
            "annual_adjustment_percent >= 0",
            name="ck_pricing_adjustment_non_negative",
        ),
    )

    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Base values (integer currency units)
    min_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    weekday_normal_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    weekend_value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    # Holiday pricing
    holiday_value_manual: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    holiday_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(6, 4), nullable=False, default=Decimal("1.5")
    )

    # Periodic adjustment
    annual_adjustment_percent: Mapped[Decimal] = mapped_column(
        Numeric(6, 2), nullable=False, default=Decimal("5")
    )
    apply_monthly_adjustment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    apply_monthly_costs_to_calendar: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    last_adjustment_applied_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Ordered list of {name, start_month, start_day, end_month, end_day, multiplier}
    custom_seasons: Mapped[Any] = mapped_column(JSONB, nullable=False, default=list)

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="pricing_config")

    def __repr__(self) -> str:
        return (
            f"<PropertyPricingConfig(property={self.property_id}, "
            f"weekday={self.weekday_normal_value}, weekend={self.weekend_value})>"
        )


class MonthlyCostEventRecord(Base):
    """
    Immutable audit row for monthly-cadence adjustments.
    No updated_at column by design.
    """
    __tablename__ = "monthly_cost_events"
    __table_args__ = (
        UniqueConstraint("property_id", "month", name="uq_monthly_cost_event_property_month"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    event_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="MONTHLY_COST_TRIGGER"
    )

    # Immutable timestamp -- no updated_at
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<MonthlyCostEventRecord(id={self.id}, property={self.property_id}, "
            f"month={self.month})>"
        )
