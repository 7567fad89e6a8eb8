"""
Calendar Service -- gathers engine inputs and assembles a month grid.

Reads the three independent inputs of the calendar engine:

- the property's pricing configuration (defaults if never configured)
- the holiday table for the requested year (empty on source failure)
- reservations touching the requested month

then hands them to ``build_month_calendar``.  The holiday fetch is an
outbound HTTP call and runs concurrently with the database reads.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.integrations.holidayApi import get_holidays
from src.services import pricingConfigService, reservationService
from src.services.calendarAssembly import (
    CalendarDay,
    available_dates,
    build_month_calendar,
    month_bounds,
    suggest_price,
)
from src.services.occupancyMapper import ReservationSpan
from src.services.pricingEngine import PricingConfig

logger = logging.getLogger(__name__)


@dataclass
class MonthCalendar:
    """An assembled month plus the config it was priced with."""
    property_id: uuid.UUID
    year: int
    month: int
    config: PricingConfig
    days: list[CalendarDay]
    holidays_available: bool


@dataclass
class AvailableNight:
    date: date
    suggested_price: int


async def _load_db_inputs(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: date,
    end: date,
) -> tuple[PricingConfig, list[ReservationSpan]]:
    config = await pricingConfigService.get_pricing_config(db, property_id)
    reservations = await reservationService.list_reservations(db, property_id, start, end)
    return config, reservations


async def get_month_calendar(
    db: AsyncSession,
    property_id: uuid.UUID,
    year: int,
    month: int,
    include_occupancy: bool = True,
) -> MonthCalendar:
    """Build the calendar for one property and month.

    Raises:
        ValueError: If the property does not exist or ``month`` is invalid.
        InvalidPricingConfigError: If the property's pricing is not usable
            (e.g. never configured, so base values are still zero).
    """
    start, end = month_bounds(year, month)

    holidays, (config, reservations) = await asyncio.gather(
        get_holidays(year, year),
        _load_db_inputs(db, property_id, start, end),
    )

    days = build_month_calendar(
        property_id=property_id,
        month=month,
        year=year,
        config=config,
        holidays=holidays,
        reservations=reservations,
        include_occupancy=include_occupancy,
    )

    logger.info(
        "Calendar assembled: property=%s, month=%04d-%02d, holidays=%d, reservations=%d",
        property_id,
        year,
        month,
        len(holidays),
        len(reservations),
    )
    return MonthCalendar(
        property_id=property_id,
        year=year,
        month=month,
        config=config,
        days=days,
        holidays_available=bool(holidays),
    )


async def get_available_nights(
    db: AsyncSession,
    property_id: uuid.UUID,
    year: int,
    month: int,
) -> list[AvailableNight]:
    """Free nights of the month with their suggested price."""
    calendar = await get_month_calendar(
        db, property_id, year, month, include_occupancy=False
    )
    return [
        AvailableNight(
            date=d,
            suggested_price=suggest_price(calendar.days, d, calendar.config.min_value),
        )
        for d in available_dates(calendar.days)
    ]
