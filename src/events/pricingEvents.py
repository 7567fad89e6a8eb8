"""
Pricing Event Emission Stubs
============================

Events raised by the scheduled price adjustment.  Downstream consumers
(expense ledger, owner notifications, analytics) subscribe to these.

The transport (Redis pub/sub or an in-process bus) is not wired yet, so each
emitter logs the event and returns its payload dict.

Events emitted:
  - pricing.monthly_cost_trigger
  - pricing.adjusted
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from src.services.pricingEngine import MonthlyCostEvent, PricingConfig

logger = logging.getLogger(__name__)


def _build_event(
    event_type: str,
    property_id: uuid.UUID,
    *,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Construct a standardised event payload."""
    return {
        "event_type": event_type,
        "property_id": str(property_id),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": data or {},
    }


def emit_monthly_cost_event(event: MonthlyCostEvent) -> dict[str, Any]:
    """Emit the monthly-cost trigger produced by a monthly-cadence adjustment."""
    payload = _build_event(
        "pricing.monthly_cost_trigger",
        event.property_id,
        data={
            "type": event.type,
            "month": event.month,
            "created_at": event.created_at.isoformat(),
        },
    )
    logger.info(
        "Event emitted: %s for property %s (%s)",
        payload["event_type"],
        event.property_id,
        event.month,
    )
    return payload


def emit_pricing_adjusted(
    property_id: uuid.UUID,
    old: PricingConfig,
    new: PricingConfig,
) -> dict[str, Any]:
    """Emit event when base values were raised by the scheduled adjustment."""
    payload = _build_event(
        "pricing.adjusted",
        property_id,
        data={
            "cadence": "monthly" if new.apply_monthly_adjustment else "annual",
            "percent": str(new.annual_adjustment_percent),
            "min_value": {"old": old.min_value, "new": new.min_value},
            "weekday_normal_value": {
                "old": old.weekday_normal_value,
                "new": new.weekday_normal_value,
            },
            "weekend_value": {"old": old.weekend_value, "new": new.weekend_value},
            "holiday_value_manual": {
                "old": old.holiday_value_manual,
                "new": new.holiday_value_manual,
            },
            "applied_at": (
                new.last_adjustment_applied_at.isoformat()
                if new.last_adjustment_applied_at
                else None
            ),
        },
    )
    logger.info(
        "Event emitted: %s for property %s (weekday %d -> %d)",
        payload["event_type"],
        property_id,
        old.weekday_normal_value,
        new.weekday_normal_value,
    )
    return payload
