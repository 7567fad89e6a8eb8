"""
Season / Holiday Resolver.

Classifies a single calendar date into exactly one price type and resolves
its nightly price.  Precedence, first match wins:

1. Holiday     -- date is in the holiday table -> effective holiday value
2. High season -- date falls in a custom season -> base * season multiplier,
                  where base is the weekend rate on Sat/Sun, else weekday rate
3. Weekend     -- Saturday or Sunday -> weekend rate
4. Weekday     -- everything else -> weekday rate

Overlapping custom seasons are resolved by list order: the first season that
contains the date wins, regardless of multiplier size.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from src.services.currencyRounding import round_currency, to_decimal
from src.services.pricingEngine import (
    CustomSeason,
    PricingConfig,
    get_effective_holiday_value,
)

logger = logging.getLogger(__name__)

# Saturday=5, Sunday=6
WEEKEND_DAYS = frozenset({5, 6})

WEEKEND_REASON = "Weekend rate"
WEEKDAY_REASON = "Weekday rate"


class PriceType(str, enum.Enum):
    HOLIDAY = "holiday"
    HIGH_SEASON = "highSeason"
    WEEKEND = "weekend"
    WEEKDAY = "weekday"


class HolidayType(str, enum.Enum):
    NATIONAL = "national"
    REGIONAL = "regional"
    OPTIONAL = "optional"

    @classmethod
    def parse(cls, value: Optional[str]) -> "HolidayType":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.OPTIONAL


@dataclass(frozen=True)
class Holiday:
    """A dated holiday from the external holiday table (read-only input)."""
    date: date
    name: str
    type: HolidayType = HolidayType.NATIONAL


@dataclass(frozen=True)
class DayPricing:
    """Pricing classification of a single date."""
    price_type: PriceType
    price: int
    reason: str
    is_holiday: bool
    holiday_name: Optional[str]
    is_weekend: bool


def is_weekend(d: date) -> bool:
    return d.weekday() in WEEKEND_DAYS


def is_date_in_season(d: date, season: CustomSeason) -> bool:
    """Whether ``d`` falls inside the season's recurring range, ignoring year.

    Both ends are inclusive.  A wrapping range (start after end, e.g.
    Dec 26 -> Jan 5) covers dates on/after the start OR on/before the end.
    """
    month_day = (d.month, d.day)
    if season.wraps_year:
        return month_day >= season.start or month_day <= season.end
    return season.start <= month_day <= season.end


def find_holiday(d: date, holidays: Iterable[Holiday]) -> Optional[Holiday]:
    for holiday in holidays:
        if holiday.date == d:
            return holiday
    return None


def find_season(d: date, seasons: Sequence[CustomSeason]) -> Optional[CustomSeason]:
    """First season in list order containing ``d``."""
    for season in seasons:
        if is_date_in_season(d, season):
            return season
    return None


def resolve_day_pricing(
    d: date,
    holidays: Iterable[Holiday],
    custom_seasons: Sequence[CustomSeason],
    config: PricingConfig,
) -> DayPricing:
    """Resolve the price type and nightly price for ``d``.

    ``is_weekend`` is reported independently of the winning price type, so a
    holiday on a Saturday is ``HOLIDAY`` with ``is_weekend=True``.
    """
    weekend = is_weekend(d)

    holiday = find_holiday(d, holidays)
    if holiday is not None:
        return DayPricing(
            price_type=PriceType.HOLIDAY,
            price=get_effective_holiday_value(config),
            reason=holiday.name,
            is_holiday=True,
            holiday_name=holiday.name,
            is_weekend=weekend,
        )

    season = find_season(d, custom_seasons) if custom_seasons else None
    if season is not None:
        base = config.weekend_value if weekend else config.weekday_normal_value
        return DayPricing(
            price_type=PriceType.HIGH_SEASON,
            price=round_currency(to_decimal(base) * season.multiplier),
            reason=f"{season.name} (x{season.multiplier})",
            is_holiday=False,
            holiday_name=None,
            is_weekend=weekend,
        )

    if weekend:
        return DayPricing(
            price_type=PriceType.WEEKEND,
            price=config.weekend_value,
            reason=WEEKEND_REASON,
            is_holiday=False,
            holiday_name=None,
            is_weekend=True,
        )

    return DayPricing(
        price_type=PriceType.WEEKDAY,
        price=config.weekday_normal_value,
        reason=WEEKDAY_REASON,
        is_holiday=False,
        holiday_name=None,
        is_weekend=False,
    )
