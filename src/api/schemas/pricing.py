"""
Pydantic v2 schemas for the property pricing API.

Covers:
- Full pricing configuration (read and full replacement)
- Custom high-season ranges
- Resolved price summary per category
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.services.pricingEngine import (
    DEFAULT_ANNUAL_ADJUSTMENT_PERCENT,
    DEFAULT_HOLIDAY_MULTIPLIER,
    CustomSeason,
    PricingConfig,
)


# ---------------------------------------------------------------------------
# Custom seasons
# ---------------------------------------------------------------------------

class CustomSeasonSchema(BaseModel):
    """A recurring date range (month/day, no year) with a price multiplier.

    Ranges where the start falls after the end wrap across New Year.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(min_length=1, max_length=100)
    start_month: int = Field(ge=1, le=12)
    start_day: int = Field(ge=1, le=31)
    end_month: int = Field(ge=1, le=12)
    end_day: int = Field(ge=1, le=31)
    multiplier: Decimal = Field(gt=0, description="Applied to the weekday or weekend rate")

    def to_domain(self) -> CustomSeason:
        return CustomSeason(
            name=self.name,
            start_month=self.start_month,
            start_day=self.start_day,
            end_month=self.end_month,
            end_day=self.end_day,
            multiplier=self.multiplier,
        )


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class PricingConfigIn(BaseModel):
    """Full replacement of a property's pricing configuration."""

    min_value: int = Field(gt=0, description="Floor nightly price (currency units)")
    weekday_normal_value: int = Field(gt=0, description="Mon-Fri nightly price")
    weekend_value: int = Field(gt=0, description="Sat/Sun nightly price")
    holiday_multiplier: Decimal = Field(
        default=DEFAULT_HOLIDAY_MULTIPLIER,
        gt=0,
        description="Applied to the weekday price on holidays without a manual value",
    )
    holiday_value_manual: Optional[int] = Field(
        default=None,
        ge=0,
        description="Fixed holiday price; 0 or null falls back to the multiplier",
    )
    annual_adjustment_percent: Decimal = Field(
        default=DEFAULT_ANNUAL_ADJUSTMENT_PERCENT,
        ge=0,
        description="Yearly inflation percentage applied by the scheduled job",
    )
    apply_monthly_adjustment: bool = Field(
        default=False,
        description="Spread the yearly percentage as a monthly compounding step",
    )
    apply_monthly_costs_to_calendar: bool = False
    custom_seasons: list[CustomSeasonSchema] = Field(default_factory=list)

    def to_domain(self, property_id: uuid.UUID) -> PricingConfig:
        """Build the domain config.

        Raises:
            ValueError: If a season's month/day pair does not exist.
        """
        return PricingConfig(
            property_id=property_id,
            min_value=self.min_value,
            weekday_normal_value=self.weekday_normal_value,
            weekend_value=self.weekend_value,
            holiday_multiplier=self.holiday_multiplier,
            holiday_value_manual=self.holiday_value_manual,
            annual_adjustment_percent=self.annual_adjustment_percent,
            apply_monthly_adjustment=self.apply_monthly_adjustment,
            apply_monthly_costs_to_calendar=self.apply_monthly_costs_to_calendar,
            custom_seasons=tuple(s.to_domain() for s in self.custom_seasons),
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class PricingConfigOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    property_id: uuid.UUID
    min_value: int
    weekday_normal_value: int
    weekend_value: int
    holiday_multiplier: Decimal
    holiday_value_manual: Optional[int] = None
    annual_adjustment_percent: Decimal
    apply_monthly_adjustment: bool
    apply_monthly_costs_to_calendar: bool
    last_adjustment_applied_at: Optional[datetime] = None
    custom_seasons: list[CustomSeasonSchema] = Field(default_factory=list)
    is_configured: bool = Field(
        description="False while base values are unset and the calendar cannot be priced",
    )
    currency: str = "BRL"


class PricingSummaryOut(BaseModel):
    """Resolved nightly price per category."""

    model_config = ConfigDict(from_attributes=True)

    property_id: uuid.UUID
    min_value: int
    weekday_value: int
    weekend_value: int
    holiday_value: int = Field(description="Manual override, or weekday * multiplier")
    currency: str = "BRL"
