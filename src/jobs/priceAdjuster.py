"""
Scheduled Price Adjustment -- Daily Job.

Walks every stored pricing configuration and applies the periodic
inflation adjustment when it is due:

1. Annual cadence: once per calendar year, by ``annual_adjustment_percent``.
2. Monthly cadence: once per calendar month, by the twelfth root of the
   annual factor.  Each monthly application also records a
   ``monthly_cost_events`` row and emits the monthly-cost trigger.

Adjusted configs are written with a compare-and-swap on
``last_adjustment_applied_at``; a run that loses the race counts the
property as a conflict and moves on.  Running the job several times on the
same day is safe.

Usage with a simple cron runner::

    python -m src.jobs.priceAdjuster
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.events.pricingEvents import emit_monthly_cost_event, emit_pricing_adjusted
from src.models import MonthlyCostEventRecord
from src.services.pricingConfigService import list_pricing_configs, save_adjusted_config
from src.services.pricingEngine import (
    InvalidPricingConfigError,
    apply_annual_adjustment,
    build_monthly_cost_event,
    month_key,
)

logger = logging.getLogger(__name__)


async def run_daily_price_adjustment(
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> dict[str, int]:
    """Apply due adjustments to every stored pricing configuration.

    Args:
        db: Async database session.  The caller commits.
        now: Optional clock override (for testing).  Defaults to UTC now.

    Returns:
        Counts keyed ``checked``, ``adjusted``, ``skipped``, ``conflicts``,
        ``invalid`` and ``cost_events``.
    """
    now = now or datetime.now(timezone.utc)
    counts = {
        "checked": 0,
        "adjusted": 0,
        "skipped": 0,
        "conflicts": 0,
        "invalid": 0,
        "cost_events": 0,
    }

    logger.info("Starting daily price adjustment at %s", now.isoformat())

    for config in await list_pricing_configs(db):
        counts["checked"] += 1

        try:
            adjusted = apply_annual_adjustment(config, now)
        except InvalidPricingConfigError as exc:
            logger.warning(
                "Skipping adjustment for property %s: invalid config %s",
                config.property_id,
                exc.problems,
            )
            counts["invalid"] += 1
            continue

        if adjusted is config:
            counts["skipped"] += 1
            continue

        saved = await save_adjusted_config(db, adjusted, config.last_adjustment_applied_at)
        if not saved:
            counts["conflicts"] += 1
            continue

        counts["adjusted"] += 1
        emit_pricing_adjusted(config.property_id, config, adjusted)

        if adjusted.apply_monthly_adjustment:
            event = build_monthly_cost_event(config.property_id, month_key(now), now)
            db.add(
                MonthlyCostEventRecord(
                    property_id=event.property_id,
                    month=event.month,
                    event_type=event.type,
                    created_at=event.created_at,
                )
            )
            await db.flush()
            emit_monthly_cost_event(event)
            counts["cost_events"] += 1

    logger.info(
        "Daily price adjustment completed. Checked: %d, adjusted: %d, skipped: %d, "
        "conflicts: %d, invalid: %d, cost events: %d.",
        counts["checked"],
        counts["adjusted"],
        counts["skipped"],
        counts["conflicts"],
        counts["invalid"],
        counts["cost_events"],
    )
    return counts


# ---------------------------------------------------------------------------
# CLI entry point (for manual runs / simple cron)
# ---------------------------------------------------------------------------

async def _cli_main() -> None:
    """Run the adjustment once with its own session."""
    from src.api.deps import async_session_factory

    async with async_session_factory() as session:
        try:
            result = await run_daily_price_adjustment(session)
            await session.commit()
            print(f"Price adjustment completed: {result}")  # noqa: T201
        except Exception:
            await session.rollback()
            logger.exception("Price adjustment failed")
            raise


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    asyncio.run(_cli_main())
