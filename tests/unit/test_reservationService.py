"""
Unit tests for reservation reads.
"""

import uuid
from datetime import date
from unittest.mock import MagicMock

import pytest

from src.models import Reservation
from src.services.reservationService import (
    get_day_movements,
    list_reservations,
    validate_reservation_span,
)


def _row(property_id, checkin, checkout) -> MagicMock:
    row = MagicMock(spec=Reservation)
    row.id = uuid.uuid4()
    row.property_id = property_id
    row.checkin_date = checkin
    row.checkout_date = checkout
    row.guest_name = None
    row.source = "direct"
    return row


def _scalars(rows) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


class TestValidateReservationSpan:

    def test_valid(self):
        validate_reservation_span(date(2025, 6, 10), date(2025, 6, 11))

    @pytest.mark.parametrize("checkout", [date(2025, 6, 10), date(2025, 6, 9)])
    def test_checkout_not_after_checkin(self, checkout):
        with pytest.raises(ValueError, match="must be after"):
            validate_reservation_span(date(2025, 6, 10), checkout)


@pytest.mark.asyncio
class TestListReservations:

    async def test_rows_converted_to_spans(self, mock_db, property_id):
        row = _row(property_id, date(2025, 6, 10), date(2025, 6, 13))
        mock_db.execute.return_value = _scalars([row])

        spans = await list_reservations(mock_db, property_id, date(2025, 6, 1), date(2025, 6, 30))

        assert len(spans) == 1
        assert spans[0].reservation_id == row.id
        assert spans[0].nights == 3
        assert spans[0].source == "direct"

    async def test_malformed_row_raises(self, mock_db, property_id):
        mock_db.execute.return_value = _scalars(
            [_row(property_id, date(2025, 6, 13), date(2025, 6, 13))]
        )
        with pytest.raises(ValueError):
            await list_reservations(mock_db, property_id, date(2025, 6, 1), date(2025, 6, 30))

    async def test_day_movements(self, mock_db, property_id):
        leaving = _row(property_id, date(2025, 6, 10), date(2025, 6, 13))
        arriving = _row(property_id, date(2025, 6, 13), date(2025, 6, 16))
        mock_db.execute.return_value = _scalars([leaving, arriving])

        movements = await get_day_movements(mock_db, property_id, date(2025, 6, 13))

        assert [r.reservation_id for r in movements.checkins] == [arriving.id]
        assert [r.reservation_id for r in movements.checkouts] == [leaving.id]
