"""
Reservation reads for the pricing calendar.

Reservations are owned by the reservation CRUD system; this module only
reads the ones overlapping a date range and hands them to the engine as
``ReservationSpan`` values.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import Reservation
from src.services.occupancyMapper import DayMovements, ReservationSpan, todays_movements

logger = logging.getLogger(__name__)


def validate_reservation_span(checkin: date, checkout: date) -> None:
    """Raise ValueError unless checkout is strictly after check-in."""
    if checkout <= checkin:
        raise ValueError(
            f"Reservation checkout ({checkout.isoformat()}) must be after "
            f"check-in ({checkin.isoformat()})"
        )


def to_span(row: Reservation) -> ReservationSpan:
    validate_reservation_span(row.checkin_date, row.checkout_date)
    return ReservationSpan(
        property_id=row.property_id,
        checkin_date=row.checkin_date,
        checkout_date=row.checkout_date,
        reservation_id=row.id,
        guest_name=row.guest_name,
        source=row.source,
    )


async def list_reservations(
    db: AsyncSession,
    property_id: Optional[uuid.UUID],
    start: date,
    end: date,
) -> list[ReservationSpan]:
    """Reservations touching ``[start, end]``, ordered by check-in.

    A reservation touches the range when it checks in on or before ``end``
    and checks out on or after ``start``, so a checkout on ``start`` is
    included.  ``property_id=None`` returns all properties.

    Raises:
        ValueError: If a stored reservation has checkout on or before check-in.
    """
    conditions = [
        Reservation.checkin_date <= end,
        Reservation.checkout_date >= start,
    ]
    if property_id is not None:
        conditions.append(Reservation.property_id == property_id)

    stmt = (
        select(Reservation)
        .where(and_(*conditions))
        .order_by(Reservation.checkin_date, Reservation.id)
    )
    result = await db.execute(stmt)
    spans = [to_span(row) for row in result.scalars().all()]

    logger.debug(
        "Loaded %d reservations for property %s between %s and %s",
        len(spans),
        property_id,
        start,
        end,
    )
    return spans


async def get_day_movements(
    db: AsyncSession,
    property_id: Optional[uuid.UUID],
    day: date,
) -> DayMovements:
    """Check-ins and check-outs on ``day``."""
    reservations = await list_reservations(db, property_id, day, day)
    return todays_movements(reservations, day)
