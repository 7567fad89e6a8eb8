"""
Property calendar API routes
============================

Month grids combining nightly prices with reservation occupancy.

  GET  /api/v1/properties/{property_id}/calendar             -- Month grid
  GET  /api/v1/properties/{property_id}/calendar/available   -- Free nights + suggested price
  GET  /api/v1/properties/{property_id}/movements            -- Check-ins / check-outs on a day
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from src.api.deps import DBSession
from src.api.schemas.calendar import (
    AvailableDateOut,
    AvailableDatesOut,
    CalendarDayOut,
    DayMovementsOut,
    MonthCalendarOut,
    OccupancyOut,
    ReservationBriefOut,
)
from src.core.config import settings
from src.services import calendarService, pricingConfigService, reservationService
from src.services.calendarAssembly import CalendarDay
from src.services.pricingEngine import InvalidPricingConfigError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Calendar"])


def _http_error(exc: ValueError) -> HTTPException:
    if isinstance(exc, InvalidPricingConfigError):
        logger.info("Calendar requested for unpriced property %s", exc.property_id)
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Pricing unavailable", "fields": exc.problems},
        )
    message = str(exc)
    if "not found" in message.lower():
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=message,
        )
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=message,
    )


def _day_to_out(day: CalendarDay) -> CalendarDayOut:
    return CalendarDayOut(
        date=day.date,
        day_of_week=day.day_of_week,
        price=day.price,
        price_type=day.price_type.value,
        price_reason=day.price_reason,
        is_holiday=day.is_holiday,
        holiday_name=day.holiday_name,
        is_weekend=day.is_weekend,
        is_available=day.is_available,
        occupancy=[
            OccupancyOut(
                reservation_id=marker.reservation.reservation_id,
                role=marker.role.value,
                checkin_date=marker.reservation.checkin_date,
                checkout_date=marker.reservation.checkout_date,
                guest_name=marker.reservation.guest_name,
                source=marker.reservation.source,
            )
            for marker in day.occupancy
        ],
    )


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/calendar
# ---------------------------------------------------------------------------

@router.get(
    "/{property_id}/calendar",
    response_model=MonthCalendarOut,
    summary="Priced month calendar for a property",
    description=(
        "One entry per day of the month with its price, price type "
        "(holiday > highSeason > weekend > weekday) and availability.  "
        "If the holiday source is unreachable the calendar is still returned "
        "without holiday pricing and ``holidays_available`` is false.  "
        "Returns 422 while the property's pricing is not configured."
    ),
)
async def get_calendar(
    property_id: uuid.UUID,
    db: DBSession,
    year: int = Query(ge=1900, le=2999, description="Four-digit year"),
    month: int = Query(ge=1, le=12, description="Month 1-12"),
    include_occupancy: bool = Query(
        default=True,
        description="Attach reservation markers to each day",
    ),
) -> MonthCalendarOut:
    try:
        calendar = await calendarService.get_month_calendar(
            db, property_id, year, month, include_occupancy=include_occupancy
        )
    except ValueError as exc:
        raise _http_error(exc)

    return MonthCalendarOut(
        property_id=property_id,
        year=year,
        month=month,
        currency=settings.currency,
        apply_monthly_costs_to_calendar=calendar.config.apply_monthly_costs_to_calendar,
        holidays_available=calendar.holidays_available,
        days=[_day_to_out(day) for day in calendar.days],
    )


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/calendar/available
# ---------------------------------------------------------------------------

@router.get(
    "/{property_id}/calendar/available",
    response_model=AvailableDatesOut,
    summary="Available nights with suggested prices",
)
async def get_available_dates(
    property_id: uuid.UUID,
    db: DBSession,
    year: int = Query(ge=1900, le=2999),
    month: int = Query(ge=1, le=12),
) -> AvailableDatesOut:
    try:
        nights = await calendarService.get_available_nights(db, property_id, year, month)
    except ValueError as exc:
        raise _http_error(exc)

    return AvailableDatesOut(
        property_id=property_id,
        year=year,
        month=month,
        currency=settings.currency,
        dates=[
            AvailableDateOut(date=night.date, suggested_price=night.suggested_price)
            for night in nights
        ],
    )


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/movements
# ---------------------------------------------------------------------------

@router.get(
    "/{property_id}/movements",
    response_model=DayMovementsOut,
    summary="Check-ins and check-outs for a day",
    description="Defaults to today when ``day`` is omitted.",
)
async def get_day_movements(
    property_id: uuid.UUID,
    db: DBSession,
    day: Optional[date] = Query(default=None, description="ISO date, e.g. 2025-07-13"),
) -> DayMovementsOut:
    day = day or date.today()
    try:
        await pricingConfigService.get_property(db, property_id)
        movements = await reservationService.get_day_movements(db, property_id, day)
    except ValueError as exc:
        raise _http_error(exc)

    return DayMovementsOut(
        property_id=property_id,
        day=movements.day,
        checkins=[
            ReservationBriefOut.model_validate(r, from_attributes=True)
            for r in movements.checkins
        ],
        checkouts=[
            ReservationBriefOut.model_validate(r, from_attributes=True)
            for r in movements.checkouts
        ],
    )
