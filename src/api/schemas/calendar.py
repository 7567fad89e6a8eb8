"""
Pydantic v2 schemas for the property calendar API.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OccupancyOut(BaseModel):
    """A reservation's role on a given day."""

    model_config = ConfigDict(from_attributes=True)

    reservation_id: Optional[uuid.UUID] = None
    role: str = Field(description="checkin, stay or checkout")
    checkin_date: date
    checkout_date: date
    guest_name: Optional[str] = None
    source: Optional[str] = None


class CalendarDayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    day_of_week: int = Field(description="Monday=0 ... Sunday=6")
    price: int
    price_type: str = Field(description="holiday, highSeason, weekend or weekday")
    price_reason: str
    is_holiday: bool
    holiday_name: Optional[str] = None
    is_weekend: bool
    is_available: bool
    occupancy: list[OccupancyOut] = Field(default_factory=list)


class MonthCalendarOut(BaseModel):
    property_id: uuid.UUID
    year: int
    month: int
    currency: str
    apply_monthly_costs_to_calendar: bool
    holidays_available: bool = Field(
        description="False when the holiday source could not be reached",
    )
    days: list[CalendarDayOut]


class AvailableDateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    suggested_price: int


class AvailableDatesOut(BaseModel):
    property_id: uuid.UUID
    year: int
    month: int
    currency: str
    dates: list[AvailableDateOut]


class ReservationBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reservation_id: Optional[uuid.UUID] = None
    checkin_date: date
    checkout_date: date
    nights: int
    guest_name: Optional[str] = None
    source: Optional[str] = None


class DayMovementsOut(BaseModel):
    """Arrivals and departures for one property on one date."""

    property_id: uuid.UUID
    day: date
    checkins: list[ReservationBriefOut]
    checkouts: list[ReservationBriefOut]
