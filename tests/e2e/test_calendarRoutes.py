"""
E2E tests for the calendar endpoints.

Seeded property: weekday 200, weekend 300, holiday multiplier 2, one
reservation 2025-07-10 -> 2025-07-13.  Holiday table: 2025-07-04.
"""

from __future__ import annotations

import pytest

from tests.e2e.conftest import (
    PRICED_PROPERTY_ID,
    RESERVATION_ID,
    UNKNOWN_PROPERTY_ID,
    UNPRICED_PROPERTY_ID,
)

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/properties"


def _days_by_date(payload: dict) -> dict[str, dict]:
    return {d["date"]: d for d in payload["days"]}


class TestMonthCalendar:

    async def test_july_2025(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["currency"] == "BRL"
        assert data["holidays_available"] is True
        assert len(data["days"]) == 31

        days = _days_by_date(data)
        assert days["2025-07-04"]["price"] == 400
        assert days["2025-07-04"]["price_type"] == "holiday"
        assert days["2025-07-04"]["holiday_name"] == "Test Day"
        assert days["2025-07-05"]["price"] == 300
        assert days["2025-07-05"]["price_type"] == "weekend"
        assert days["2025-07-06"]["price"] == 300
        assert days["2025-07-07"]["price"] == 200
        assert days["2025-07-07"]["price_type"] == "weekday"
        assert days["2025-07-07"]["day_of_week"] == 0

    async def test_reservation_markers(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )
        days = _days_by_date(resp.json())

        checkin = days["2025-07-10"]
        assert checkin["is_available"] is False
        assert checkin["occupancy"][0]["role"] == "checkin"
        assert checkin["occupancy"][0]["reservation_id"] == str(RESERVATION_ID)
        assert checkin["occupancy"][0]["guest_name"] == "Maria Silva"

        assert days["2025-07-11"]["occupancy"][0]["role"] == "stay"
        assert days["2025-07-12"]["is_available"] is False

        checkout = days["2025-07-13"]
        assert checkout["is_available"] is True
        assert checkout["occupancy"][0]["role"] == "checkout"

    async def test_without_occupancy(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar",
            params={"year": 2025, "month": 7, "include_occupancy": "false"},
        )
        days = _days_by_date(resp.json())
        assert days["2025-07-11"]["occupancy"] == []
        assert days["2025-07-11"]["is_available"] is False

    async def test_holiday_outage_degrades_gracefully(self, client, holiday_outage):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["holidays_available"] is False
        day = _days_by_date(data)["2025-07-04"]
        assert day["price_type"] == "weekday"
        assert day["price"] == 200

    async def test_unpriced_property_422(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{UNPRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )
        assert resp.status_code == 422
        assert resp.json()["detail"]["message"] == "Pricing unavailable"

    async def test_unknown_property_404(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{UNKNOWN_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )
        assert resp.status_code == 404

    async def test_invalid_month_422(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 13}
        )
        assert resp.status_code == 422

    async def test_season_from_updated_config(self, client, july_holiday_table):
        await client.put(
            f"{BASE}/{PRICED_PROPERTY_ID}/pricing",
            json={
                "min_value": 150,
                "weekday_normal_value": 200,
                "weekend_value": 300,
                "holiday_multiplier": "2",
                "custom_seasons": [
                    {
                        "name": "Ferias de Julho",
                        "start_month": 7,
                        "start_day": 1,
                        "end_month": 7,
                        "end_day": 31,
                        "multiplier": "1.5",
                    }
                ],
            },
        )

        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar", params={"year": 2025, "month": 7}
        )
        days = _days_by_date(resp.json())

        assert days["2025-07-04"]["price_type"] == "holiday"
        assert days["2025-07-07"]["price_type"] == "highSeason"
        assert days["2025-07-07"]["price"] == 300
        assert days["2025-07-07"]["price_reason"] == "Ferias de Julho (x1.5)"
        assert days["2025-07-05"]["price"] == 450
        assert days["2025-07-05"]["is_weekend"] is True


class TestAvailableDates:

    async def test_available_nights(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/calendar/available",
            params={"year": 2025, "month": 7},
        )

        assert resp.status_code == 200
        data = resp.json()
        nights = {d["date"]: d["suggested_price"] for d in data["dates"]}
        assert "2025-07-10" not in nights
        assert "2025-07-12" not in nights
        assert nights["2025-07-13"] == 300  # Sunday checkout, free to relet
        assert nights["2025-07-04"] == 400
        assert len(nights) == 28

    async def test_unpriced_property_422(self, client, july_holiday_table):
        resp = await client.get(
            f"{BASE}/{UNPRICED_PROPERTY_ID}/calendar/available",
            params={"year": 2025, "month": 7},
        )
        assert resp.status_code == 422


class TestDayMovements:

    async def test_checkin_day(self, client):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/movements", params={"day": "2025-07-10"}
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["day"] == "2025-07-10"
        assert data["checkouts"] == []
        assert len(data["checkins"]) == 1
        arrival = data["checkins"][0]
        assert arrival["reservation_id"] == str(RESERVATION_ID)
        assert arrival["guest_name"] == "Maria Silva"
        assert arrival["nights"] == 3

    async def test_checkout_day(self, client):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/movements", params={"day": "2025-07-13"}
        )
        data = resp.json()
        assert data["checkins"] == []
        assert [r["reservation_id"] for r in data["checkouts"]] == [str(RESERVATION_ID)]

    async def test_stay_night_has_no_movements(self, client):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/movements", params={"day": "2025-07-11"}
        )
        data = resp.json()
        assert data["checkins"] == []
        assert data["checkouts"] == []

    async def test_other_property_sees_nothing(self, client):
        resp = await client.get(
            f"{BASE}/{UNPRICED_PROPERTY_ID}/movements", params={"day": "2025-07-10"}
        )
        assert resp.status_code == 200
        assert resp.json()["checkins"] == []

    async def test_unknown_property_404(self, client):
        resp = await client.get(
            f"{BASE}/{UNKNOWN_PROPERTY_ID}/movements", params={"day": "2025-07-10"}
        )
        assert resp.status_code == 404

    async def test_malformed_day_422(self, client):
        resp = await client.get(
            f"{BASE}/{PRICED_PROPERTY_ID}/movements", params={"day": "13/07/2025"}
        )
        assert resp.status_code == 422
