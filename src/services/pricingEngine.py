"""
Pricing Rule Evaluator for rental properties.

Resolves a property's pricing configuration into concrete nightly prices:

- Minimum, weekday and weekend base rates (stored as integer currency units)
- Holiday rate: a manual override, or ``weekday_normal_value * holiday_multiplier``
- Periodic rate inflation by ``annual_adjustment_percent``:
  - Annual cadence: flat factor ``1 + p/100``, at most once per calendar year
  - Monthly cadence: compounding factor ``(1 + p/100) ** (1/12)``, at most
    once per calendar month

All functions here are pure.  ``PricingConfig`` is a frozen value; an
adjustment returns a new config and the caller is responsible for
persisting it (see ``src.services.pricingConfigService``).
"""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from src.services.currencyRounding import Number, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Defaults applied when a property is configured for the first time
DEFAULT_HOLIDAY_MULTIPLIER = Decimal("1.5")
DEFAULT_ANNUAL_ADJUSTMENT_PERCENT = Decimal("5")
DEFAULT_SEASON_NAME = "Season"

MONTHLY_COST_EVENT_TYPE = "MONTHLY_COST_TRIGGER"

# Leap year used to validate month/day pairs that carry no year (Feb 29 is valid)
_REFERENCE_LEAP_YEAR = 2024


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class InvalidPricingConfigError(ValueError):
    """Raised when a pricing configuration cannot be used to compute prices."""

    def __init__(self, property_id: Any, problems: dict[str, str]) -> None:
        self.property_id = property_id
        self.problems = problems
        details = "; ".join(f"{name} {reason}" for name, reason in problems.items())
        super().__init__(
            f"Invalid pricing configuration for property {property_id}: {details}"
        )

    @property
    def fields(self) -> list[str]:
        return list(self.problems)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CustomSeason:
    """A recurring high-demand date range (month/day only, no year).

    The range may wrap across the year boundary, e.g. Dec 26 -> Jan 5.
    """
    name: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int
    multiplier: Decimal

    def __post_init__(self) -> None:
        _check_month_day("start", self.start_month, self.start_day)
        _check_month_day("end", self.end_month, self.end_day)
        multiplier = to_decimal(self.multiplier)
        if multiplier <= 0:
            raise ValueError(
                f"Season '{self.name}' multiplier must be positive, got {self.multiplier}"
            )
        object.__setattr__(self, "multiplier", multiplier)

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_month, self.start_day)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_month, self.end_day)

    @property
    def wraps_year(self) -> bool:
        return self.start > self.end

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "start_month": self.start_month,
            "start_day": self.start_day,
            "end_month": self.end_month,
            "end_day": self.end_day,
            "multiplier": str(self.multiplier),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomSeason":
        return cls(
            name=str(data.get("name") or "").strip() or DEFAULT_SEASON_NAME,
            start_month=int(data["start_month"]),
            start_day=int(data["start_day"]),
            end_month=int(data["end_month"]),
            end_day=int(data["end_day"]),
            multiplier=to_decimal(data["multiplier"]),
        )


@dataclass(frozen=True)
class PricingConfig:
    """Pricing configuration for one property.

    Base values are integer currency units.  ``apply_monthly_costs_to_calendar``
    is only read by the presentation layer.
    """
    property_id: uuid.UUID
    min_value: int
    weekday_normal_value: int
    weekend_value: int
    holiday_multiplier: Decimal = DEFAULT_HOLIDAY_MULTIPLIER
    holiday_value_manual: Optional[int] = None
    annual_adjustment_percent: Decimal = DEFAULT_ANNUAL_ADJUSTMENT_PERCENT
    apply_monthly_adjustment: bool = False
    apply_monthly_costs_to_calendar: bool = False
    last_adjustment_applied_at: Optional[datetime] = None
    custom_seasons: tuple[CustomSeason, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "holiday_multiplier", to_decimal(self.holiday_multiplier))
        object.__setattr__(
            self, "annual_adjustment_percent", to_decimal(self.annual_adjustment_percent)
        )
        object.__setattr__(self, "custom_seasons", tuple(self.custom_seasons))


@dataclass(frozen=True)
class PricingSummary:
    """Resolved price per category, as shown to the property owner."""
    min_value: int
    weekday_value: int
    weekend_value: int
    holiday_value: int


@dataclass(frozen=True)
class MonthlyCostEvent:
    """Immutable trigger emitted when a monthly-cadence adjustment fires."""
    property_id: uuid.UUID
    month: str  # YYYY-MM
    created_at: datetime
    type: str = MONTHLY_COST_EVENT_TYPE


# ---------------------------------------------------------------------------
# Configuration defaults & validation
# ---------------------------------------------------------------------------

def default_pricing_config(property_id: uuid.UUID) -> PricingConfig:
    """Configuration for a property that has never been priced.

    Base values start at zero, so the result is deliberately invalid for
    calendar assembly until the owner fills them in.
    """
    return PricingConfig(
        property_id=property_id,
        min_value=0,
        weekday_normal_value=0,
        weekend_value=0,
        holiday_multiplier=DEFAULT_HOLIDAY_MULTIPLIER,
        holiday_value_manual=None,
        annual_adjustment_percent=DEFAULT_ANNUAL_ADJUSTMENT_PERCENT,
        apply_monthly_adjustment=False,
        apply_monthly_costs_to_calendar=False,
    )


def validate_pricing_config(config: PricingConfig) -> PricingConfig:
    """Return ``config`` unchanged, or raise if it cannot be priced.

    Raises:
        InvalidPricingConfigError: If a base value is not strictly positive,
            the holiday multiplier is not positive, or the adjustment
            percentage is negative.
    """
    problems: dict[str, str] = {}
    for name in ("min_value", "weekday_normal_value", "weekend_value"):
        if getattr(config, name) <= 0:
            problems[name] = "must be greater than zero"
    if config.holiday_multiplier <= 0:
        problems["holiday_multiplier"] = "must be greater than zero"
    if config.holiday_value_manual is not None and config.holiday_value_manual < 0:
        problems["holiday_value_manual"] = "cannot be negative"
    if config.annual_adjustment_percent < 0:
        problems["annual_adjustment_percent"] = "cannot be negative"

    if problems:
        raise InvalidPricingConfigError(config.property_id, problems)
    return config


# ---------------------------------------------------------------------------
# Price resolution
# ---------------------------------------------------------------------------

def get_effective_holiday_value(config: PricingConfig) -> int:
    """Nightly price for declared holidays.

    A positive manual override wins; otherwise the weekday rate is scaled
    by the holiday multiplier.
    """
    if config.holiday_value_manual is not None and config.holiday_value_manual > 0:
        return round_currency(config.holiday_value_manual)
    return round_currency(
        to_decimal(config.weekday_normal_value) * config.holiday_multiplier
    )


def summarize_pricing(config: PricingConfig) -> PricingSummary:
    """Resolved price per category.

    Raises:
        InvalidPricingConfigError: If the config cannot be priced.
    """
    validate_pricing_config(config)
    return PricingSummary(
        min_value=config.min_value,
        weekday_value=config.weekday_normal_value,
        weekend_value=config.weekend_value,
        holiday_value=get_effective_holiday_value(config),
    )


# ---------------------------------------------------------------------------
# Periodic rate adjustment
# ---------------------------------------------------------------------------

def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from ``start`` to ``end`` (days are ignored)."""
    return end.year * 12 + end.month - (start.year * 12 + start.month)


def annual_adjustment_factor(percent: Number) -> Decimal:
    return Decimal("1") + to_decimal(percent) / Decimal("100")


def monthly_adjustment_factor(percent: Number) -> Decimal:
    """Factor that compounds to ``1 + percent/100`` over twelve months."""
    return annual_adjustment_factor(percent) ** (Decimal("1") / Decimal("12"))


def apply_annual_adjustment(config: PricingConfig, now: datetime) -> PricingConfig:
    """Inflate base prices by ``annual_adjustment_percent`` if due.

    Returns ``config`` itself (same object) when nothing is due, so callers
    can detect a no-op with ``result is config``.  Applying twice with the
    same ``now`` never changes prices a second time.

    Raises:
        InvalidPricingConfigError: If the config cannot be priced.  Invalid
            configs are never adjusted.
    """
    validate_pricing_config(config)

    percent = config.annual_adjustment_percent
    if percent <= 0:
        return config

    last_applied = config.last_adjustment_applied_at

    if config.apply_monthly_adjustment:
        if last_applied is not None and months_between(last_applied, now) < 1:
            return config
        factor = monthly_adjustment_factor(percent)
    else:
        # Keyed on calendar year: Dec 31 followed by Jan 1 applies twice.
        if last_applied is not None and last_applied.year == now.year:
            return config
        factor = annual_adjustment_factor(percent)

    adjusted = replace(
        config,
        min_value=round_currency(to_decimal(config.min_value) * factor),
        weekday_normal_value=round_currency(to_decimal(config.weekday_normal_value) * factor),
        weekend_value=round_currency(to_decimal(config.weekend_value) * factor),
        holiday_value_manual=(
            round_currency(to_decimal(config.holiday_value_manual) * factor)
            if config.holiday_value_manual is not None
            else None
        ),
        last_adjustment_applied_at=now,
    )
    logger.debug(
        "Adjustment computed for property %s (%s cadence, factor=%s): weekday %d -> %d",
        config.property_id,
        "monthly" if config.apply_monthly_adjustment else "annual",
        factor,
        config.weekday_normal_value,
        adjusted.weekday_normal_value,
    )
    return adjusted


def build_monthly_cost_event(
    property_id: uuid.UUID,
    month: str,
    created_at: datetime,
) -> MonthlyCostEvent:
    return MonthlyCostEvent(property_id=property_id, month=month, created_at=created_at)


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _check_month_day(label: str, month: int, day: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Season {label} month must be 1-12, got {month}")
    last_day = calendar.monthrange(_REFERENCE_LEAP_YEAR, month)[1]
    if not 1 <= day <= last_day:
        raise ValueError(
            f"Season {label} day must be 1-{last_day} for month {month}, got {day}"
        )
