"""
Property pricing API routes
===========================

Endpoints for reading and replacing a property's pricing configuration.

  GET  /api/v1/properties/{property_id}/pricing           -- Stored config (or defaults)
  PUT  /api/v1/properties/{property_id}/pricing           -- Replace config
  GET  /api/v1/properties/{property_id}/pricing/summary   -- Resolved price per category
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, HTTPException, status

from src.api.deps import DBSession
from src.api.schemas.pricing import (
    CustomSeasonSchema,
    PricingConfigIn,
    PricingConfigOut,
    PricingSummaryOut,
)
from src.core.config import settings
from src.services import pricingConfigService
from src.services.pricingEngine import (
    InvalidPricingConfigError,
    PricingConfig,
    summarize_pricing,
    validate_pricing_config,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Pricing"])


def _http_error(exc: ValueError) -> HTTPException:
    """Map service-layer ValueErrors to HTTP errors."""
    if isinstance(exc, InvalidPricingConfigError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "fields": exc.problems},
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


def _to_out(config: PricingConfig) -> PricingConfigOut:
    try:
        validate_pricing_config(config)
        configured = True
    except InvalidPricingConfigError:
        configured = False

    return PricingConfigOut(
        property_id=config.property_id,
        min_value=config.min_value,
        weekday_normal_value=config.weekday_normal_value,
        weekend_value=config.weekend_value,
        holiday_multiplier=config.holiday_multiplier,
        holiday_value_manual=config.holiday_value_manual,
        annual_adjustment_percent=config.annual_adjustment_percent,
        apply_monthly_adjustment=config.apply_monthly_adjustment,
        apply_monthly_costs_to_calendar=config.apply_monthly_costs_to_calendar,
        last_adjustment_applied_at=config.last_adjustment_applied_at,
        custom_seasons=[
            CustomSeasonSchema.model_validate(season) for season in config.custom_seasons
        ],
        is_configured=configured,
        currency=settings.currency,
    )


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/pricing
# ---------------------------------------------------------------------------

@router.get(
    "/{property_id}/pricing",
    response_model=PricingConfigOut,
    summary="Get a property's pricing configuration",
    description=(
        "Returns the stored configuration.  Properties that were never priced "
        "get the defaults (zero base values, 1.5x holiday multiplier, 5% "
        "yearly adjustment) with ``is_configured=false``."
    ),
)
async def get_pricing(
    property_id: uuid.UUID,
    db: DBSession,
) -> PricingConfigOut:
    try:
        config = await pricingConfigService.get_pricing_config(db, property_id)
    except ValueError as exc:
        raise _http_error(exc)
    return _to_out(config)


# ---------------------------------------------------------------------------
# PUT /api/v1/properties/{property_id}/pricing
# ---------------------------------------------------------------------------

@router.put(
    "/{property_id}/pricing",
    response_model=PricingConfigOut,
    summary="Replace a property's pricing configuration",
)
async def put_pricing(
    property_id: uuid.UUID,
    body: PricingConfigIn,
    db: DBSession,
) -> PricingConfigOut:
    try:
        config = body.to_domain(property_id)
        saved = await pricingConfigService.update_pricing_config(db, property_id, config)
    except ValueError as exc:
        raise _http_error(exc)
    return _to_out(saved)


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{property_id}/pricing/summary
# ---------------------------------------------------------------------------

@router.get(
    "/{property_id}/pricing/summary",
    response_model=PricingSummaryOut,
    summary="Resolved nightly price per category",
    description="Returns 422 while the property's pricing is not configured.",
)
async def get_pricing_summary(
    property_id: uuid.UUID,
    db: DBSession,
) -> PricingSummaryOut:
    try:
        config = await pricingConfigService.get_pricing_config(db, property_id)
        summary = summarize_pricing(config)
    except ValueError as exc:
        raise _http_error(exc)

    return PricingSummaryOut(
        property_id=property_id,
        min_value=summary.min_value,
        weekday_value=summary.weekday_value,
        weekend_value=summary.weekend_value,
        holiday_value=summary.holiday_value,
        currency=settings.currency,
    )
