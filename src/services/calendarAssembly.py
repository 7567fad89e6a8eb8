"""
Calendar Assembly -- per-day price/occupancy grid for one property and month.

For every date of the requested month, combines:

- the Season/Holiday Resolver's classification and price
- the Reservation Occupancy Mapper's markers for the property

A day is available when the property has no ``checkin`` or ``stay`` marker on
it.  A bare ``checkout`` does not block the night, since the unit can be
relet the same day.

``CalendarDay`` values are never persisted; the grid is recomputed on every
request from the config, the holiday table and the reservation list.
"""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from src.services.occupancyMapper import (
    OccupancyMarker,
    ReservationSpan,
    is_blocking,
    map_occupancy,
    occupancy_for_property,
)
from src.services.pricingEngine import PricingConfig, validate_pricing_config
from src.services.seasonResolver import Holiday, PriceType, resolve_day_pricing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarDay:
    """One day of the assembled calendar.

    ``day_of_week`` follows ``date.weekday()``: Monday=0 ... Sunday=6.
    """
    date: date
    day_of_week: int
    price: int
    price_type: PriceType
    price_reason: str
    is_holiday: bool
    holiday_name: Optional[str]
    is_weekend: bool
    is_available: bool = True
    occupancy: tuple[OccupancyMarker, ...] = field(default_factory=tuple)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last date (inclusive) of a month.

    Raises:
        ValueError: If ``month`` is not 1-12.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def build_month_calendar(
    property_id: uuid.UUID,
    month: int,
    year: int,
    config: PricingConfig,
    holidays: Optional[Iterable[Holiday]],
    reservations: Iterable[ReservationSpan],
    include_occupancy: bool = True,
) -> list[CalendarDay]:
    """Assemble the ordered day grid for ``property_id`` in ``year``/``month``.

    Args:
        property_id: Property the grid is built for.  Reservations belonging
            to other properties are ignored.
        month: 1-12.
        year: Four-digit year.
        config: The property's pricing configuration.  Must be valid; pass
            defaults rather than ``None`` for unconfigured properties.
        holidays: Holiday table.  ``None`` or empty means no holiday
            overrides (degraded mode when the holiday source failed).
        reservations: Reservations overlapping the month.
        include_occupancy: Attach the property's markers to each day.
            Availability is computed either way.

    Returns:
        One ``CalendarDay`` per date of the month, ascending.

    Raises:
        InvalidPricingConfigError: If ``config`` has non-positive base values.
        ValueError: If ``month`` is out of range.
    """
    validate_pricing_config(config)
    first, last = month_bounds(year, month)

    month_holidays = [h for h in (holidays or ()) if first <= h.date <= last]
    occupancy = occupancy_for_property(map_occupancy(reservations), property_id)

    days: list[CalendarDay] = []
    current = first
    while current <= last:
        pricing = resolve_day_pricing(
            current, month_holidays, config.custom_seasons, config
        )
        markers = occupancy.get(current, [])
        days.append(
            CalendarDay(
                date=current,
                day_of_week=current.weekday(),
                price=pricing.price,
                price_type=pricing.price_type,
                price_reason=pricing.reason,
                is_holiday=pricing.is_holiday,
                holiday_name=pricing.holiday_name,
                is_weekend=pricing.is_weekend,
                is_available=not is_blocking(markers, property_id),
                occupancy=tuple(markers) if include_occupancy else (),
            )
        )
        current += timedelta(days=1)

    logger.debug(
        "Built %04d-%02d calendar for property %s: %d days, %d holidays, %d occupied dates",
        year,
        month,
        property_id,
        len(days),
        len(month_holidays),
        len(occupancy),
    )
    return days


def available_dates(days: Sequence[CalendarDay]) -> list[date]:
    return [day.date for day in days if day.is_available]


def suggest_price(days: Sequence[CalendarDay], d: date, min_value: int) -> int:
    """Suggested nightly price for ``d``, floored at the property minimum.

    Raises:
        ValueError: If ``d`` is not part of ``days``.
    """
    for day in days:
        if day.date == d:
            return max(day.price, min_value)
    raise ValueError(f"Date {d.isoformat()} is not in the assembled calendar")
