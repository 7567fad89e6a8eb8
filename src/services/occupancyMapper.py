"""
Reservation Occupancy Mapper.

Expands each reservation's [check-in, check-out) span into per-date markers:

- check-in date           -> ``checkin``
- nights strictly between -> ``stay``
- check-out date          -> ``checkout``

Markers from different reservations stack on the same date (a same-day
turnover yields both a ``checkout`` and a ``checkin``).  Nothing is
deduplicated or flagged here; spans are assumed valid (checkout after
check-in), see ``reservationService.validate_reservation_span``.
"""

from __future__ import annotations

import enum
import uuid
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence, Union

DateLike = Union[date, datetime]


class OccupancyRole(str, enum.Enum):
    CHECKIN = "checkin"
    STAY = "stay"
    CHECKOUT = "checkout"


# Roles that make a night unavailable; a bare checkout leaves it free to relet
BLOCKING_ROLES = frozenset({OccupancyRole.CHECKIN, OccupancyRole.STAY})


@dataclass(frozen=True)
class ReservationSpan:
    """The slice of a reservation the engine needs."""
    property_id: uuid.UUID
    checkin_date: date
    checkout_date: date
    reservation_id: Optional[uuid.UUID] = None
    guest_name: Optional[str] = None
    source: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "checkin_date", _as_date(self.checkin_date))
        object.__setattr__(self, "checkout_date", _as_date(self.checkout_date))

    @property
    def nights(self) -> int:
        return (self.checkout_date - self.checkin_date).days


@dataclass(frozen=True)
class OccupancyMarker:
    reservation: ReservationSpan
    role: OccupancyRole

    @property
    def property_id(self) -> uuid.UUID:
        return self.reservation.property_id


@dataclass(frozen=True)
class DayMovements:
    """Check-ins and check-outs happening on one date."""
    day: date
    checkins: list[ReservationSpan]
    checkouts: list[ReservationSpan]


OccupancyMap = dict[date, list[OccupancyMarker]]


def map_occupancy(reservations: Iterable[ReservationSpan]) -> OccupancyMap:
    """Build a ``date -> markers`` map for all reservations.

    Linear in the total number of reservation nights.  Dates with no
    markers are absent from the map.
    """
    occupancy: defaultdict[date, list[OccupancyMarker]] = defaultdict(list)

    for reservation in reservations:
        checkin = reservation.checkin_date
        checkout = reservation.checkout_date

        occupancy[checkin].append(OccupancyMarker(reservation, OccupancyRole.CHECKIN))
        occupancy[checkout].append(OccupancyMarker(reservation, OccupancyRole.CHECKOUT))

        current = checkin + timedelta(days=1)
        while current < checkout:
            occupancy[current].append(OccupancyMarker(reservation, OccupancyRole.STAY))
            current += timedelta(days=1)

    return dict(occupancy)


def occupancy_for_property(occupancy: OccupancyMap, property_id: Any) -> OccupancyMap:
    filtered: OccupancyMap = {}
    for day, markers in occupancy.items():
        own = [m for m in markers if m.property_id == property_id]
        if own:
            filtered[day] = own
    return filtered


def is_blocking(markers: Sequence[OccupancyMarker], property_id: Any) -> bool:
    """True when the property has a check-in or stay marker on that date."""
    return any(
        m.role in BLOCKING_ROLES and m.property_id == property_id for m in markers
    )


def todays_movements(reservations: Iterable[ReservationSpan], today: DateLike) -> DayMovements:
    day = _as_date(today)
    checkins: list[ReservationSpan] = []
    checkouts: list[ReservationSpan] = []
    for reservation in reservations:
        if reservation.checkin_date == day:
            checkins.append(reservation)
        if reservation.checkout_date == day:
            checkouts.append(reservation)
    return DayMovements(day=day, checkins=checkins, checkouts=checkouts)


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value
