"""
Pricing Configuration Service
=============================

Persistence side of the pricing engine: loads and stores one
``PropertyPricingConfig`` row per property and converts it to and from the
immutable ``PricingConfig`` domain value.

- Properties that were never priced get ``default_pricing_config``.
- Updates replace the whole configuration (never partial) and are
  validated before they are written.
- Scheduled adjustments are written with a compare-and-swap on
  ``last_adjustment_applied_at`` so two concurrent runs cannot both apply
  the same period's adjustment.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import Property, PropertyPricingConfig
from src.services.pricingEngine import (
    DEFAULT_HOLIDAY_MULTIPLIER,
    CustomSeason,
    PricingConfig,
    default_pricing_config,
    validate_pricing_config,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Row <-> domain mapping
# ---------------------------------------------------------------------------

def to_domain(row: PropertyPricingConfig) -> PricingConfig:
    """Convert an ORM row to a ``PricingConfig``.

    A zero or missing holiday multiplier is replaced by the default here,
    at the configuration layer.
    """
    multiplier = row.holiday_multiplier
    if not multiplier or multiplier <= 0:
        multiplier = DEFAULT_HOLIDAY_MULTIPLIER

    return PricingConfig(
        property_id=row.property_id,
        min_value=int(row.min_value or 0),
        weekday_normal_value=int(row.weekday_normal_value or 0),
        weekend_value=int(row.weekend_value or 0),
        holiday_multiplier=multiplier,
        holiday_value_manual=row.holiday_value_manual,
        annual_adjustment_percent=row.annual_adjustment_percent or 0,
        apply_monthly_adjustment=bool(row.apply_monthly_adjustment),
        apply_monthly_costs_to_calendar=bool(row.apply_monthly_costs_to_calendar),
        last_adjustment_applied_at=row.last_adjustment_applied_at,
        custom_seasons=tuple(
            CustomSeason.from_dict(entry) for entry in (row.custom_seasons or [])
        ),
    )


def _apply_to_row(row: PropertyPricingConfig, config: PricingConfig) -> None:
    row.min_value = config.min_value
    row.weekday_normal_value = config.weekday_normal_value
    row.weekend_value = config.weekend_value
    row.holiday_value_manual = config.holiday_value_manual
    row.holiday_multiplier = config.holiday_multiplier
    row.annual_adjustment_percent = config.annual_adjustment_percent
    row.apply_monthly_adjustment = config.apply_monthly_adjustment
    row.apply_monthly_costs_to_calendar = config.apply_monthly_costs_to_calendar
    row.custom_seasons = [season.as_dict() for season in config.custom_seasons]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

async def get_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    """Fetch a property by ID or raise ValueError."""
    result = await db.execute(select(Property).where(Property.id == property_id))
    prop = result.scalar_one_or_none()
    if prop is None:
        raise ValueError(f"Property not found: {property_id}")
    return prop


async def _get_config_row(
    db: AsyncSession,
    property_id: uuid.UUID,
) -> Optional[PropertyPricingConfig]:
    result = await db.execute(
        select(PropertyPricingConfig).where(PropertyPricingConfig.property_id == property_id)
    )
    return result.scalar_one_or_none()


async def get_pricing_config(db: AsyncSession, property_id: uuid.UUID) -> PricingConfig:
    """Stored configuration for a property, or defaults if it has none.

    Raises:
        ValueError: If the property does not exist.
    """
    await get_property(db, property_id)
    row = await _get_config_row(db, property_id)
    if row is None:
        logger.debug("No pricing config for property %s, using defaults", property_id)
        return default_pricing_config(property_id)
    return to_domain(row)


async def list_pricing_configs(db: AsyncSession) -> list[PricingConfig]:
    """All stored configurations, ordered by property.

    Rows already in the session are refreshed from the database, since
    ``save_adjusted_config`` writes around the identity map.
    """
    result = await db.execute(
        select(PropertyPricingConfig)
        .order_by(PropertyPricingConfig.property_id)
        .execution_options(populate_existing=True)
    )
    return [to_domain(row) for row in result.scalars().all()]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def update_pricing_config(
    db: AsyncSession,
    property_id: uuid.UUID,
    config: PricingConfig,
) -> PricingConfig:
    """Replace a property's pricing configuration.

    ``last_adjustment_applied_at`` is owned by the adjustment job and is
    kept from the stored row.

    Raises:
        ValueError: If the property does not exist.
        InvalidPricingConfigError: If ``config`` is invalid.
    """
    if config.property_id != property_id:
        raise ValueError(
            f"Config belongs to property {config.property_id}, not {property_id}"
        )
    await get_property(db, property_id)
    validate_pricing_config(config)

    row = await _get_config_row(db, property_id)
    if row is None:
        row = PropertyPricingConfig(property_id=property_id)
        db.add(row)
    _apply_to_row(row, config)
    await db.flush()

    logger.info(
        "Pricing config updated: property=%s, min=%d, weekday=%d, weekend=%d, seasons=%d",
        property_id,
        config.min_value,
        config.weekday_normal_value,
        config.weekend_value,
        len(config.custom_seasons),
    )
    return to_domain(row)


async def save_adjusted_config(
    db: AsyncSession,
    config: PricingConfig,
    previous_applied_at: Optional[datetime],
) -> bool:
    """Persist an adjusted config if nobody else adjusted it first.

    The write only succeeds when the stored ``last_adjustment_applied_at``
    still equals ``previous_applied_at``.

    Returns:
        True if the row was updated, False on a concurrent-writer conflict.
    """
    if previous_applied_at is None:
        guard = PropertyPricingConfig.last_adjustment_applied_at.is_(None)
    else:
        guard = PropertyPricingConfig.last_adjustment_applied_at == previous_applied_at

    stmt = (
        update(PropertyPricingConfig)
        .where(PropertyPricingConfig.property_id == config.property_id, guard)
        .values(
            min_value=config.min_value,
            weekday_normal_value=config.weekday_normal_value,
            weekend_value=config.weekend_value,
            holiday_value_manual=config.holiday_value_manual,
            last_adjustment_applied_at=config.last_adjustment_applied_at,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)

    if result.rowcount != 1:
        logger.warning(
            "Adjustment conflict for property %s: last_adjustment_applied_at changed "
            "since it was read (expected %s)",
            config.property_id,
            previous_applied_at,
        )
        return False
    return True
