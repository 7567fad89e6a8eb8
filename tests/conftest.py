"""
Shared pytest fixtures for the rental pricing unit tests.

Provides a mock database session and sample domain values so the engine
and services can be tested without a live database.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.integrations import holidayApi
from src.models import PropertyPricingConfig
from src.services.occupancyMapper import ReservationSpan
from src.services.pricingEngine import CustomSeason, PricingConfig
from src.services.seasonResolver import Holiday, HolidayType


PROPERTY_ID = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")


# ---------------------------------------------------------------------------
# Database session mock
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_db() -> AsyncMock:
    """Async mock of ``AsyncSession``.

    Supports ``db.execute()``, ``db.add()``, ``db.flush()`` and
    ``db.commit()``.  Tests set ``mock_db.execute.side_effect`` or
    ``return_value`` to control query results.
    """
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


# ---------------------------------------------------------------------------
# Holiday source isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_holiday_source():
    """No test leaks a holiday override or cached year into another."""
    holidayApi.set_holiday_override(None)
    holidayApi.clear_holiday_cache()
    yield
    holidayApi.set_holiday_override(None)
    holidayApi.clear_holiday_cache()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def property_id() -> uuid.UUID:
    return PROPERTY_ID


@pytest.fixture
def basic_config() -> PricingConfig:
    """Weekday 200, weekend 300, holiday 1.5x (=300), no seasons."""
    return PricingConfig(
        property_id=PROPERTY_ID,
        min_value=150,
        weekday_normal_value=200,
        weekend_value=300,
        holiday_multiplier=Decimal("1.5"),
        holiday_value_manual=None,
        annual_adjustment_percent=Decimal("5"),
    )


@pytest.fixture
def july_config() -> PricingConfig:
    """Weekday 200, weekend 300, holiday 2x (=400)."""
    return PricingConfig(
        property_id=PROPERTY_ID,
        min_value=150,
        weekday_normal_value=200,
        weekend_value=300,
        holiday_multiplier=Decimal("2"),
    )


@pytest.fixture
def new_year_season() -> CustomSeason:
    return CustomSeason(
        name="Reveillon",
        start_month=12,
        start_day=26,
        end_month=1,
        end_day=5,
        multiplier=Decimal("2"),
    )


@pytest.fixture
def july_holidays() -> list[Holiday]:
    return [Holiday(date=date(2025, 7, 4), name="Test Day", type=HolidayType.NATIONAL)]


@pytest.fixture
def sample_reservation() -> ReservationSpan:
    return ReservationSpan(
        property_id=PROPERTY_ID,
        checkin_date=date(2025, 6, 10),
        checkout_date=date(2025, 6, 13),
        reservation_id=uuid.uuid4(),
        guest_name="Maria Silva",
        source="airbnb",
    )


@pytest.fixture
def sample_config_row() -> PropertyPricingConfig:
    """A stored configuration row as the ORM would load it."""
    row = MagicMock(spec=PropertyPricingConfig)
    row.property_id = PROPERTY_ID
    row.min_value = 150
    row.weekday_normal_value = 200
    row.weekend_value = 300
    row.holiday_value_manual = None
    row.holiday_multiplier = Decimal("1.5000")
    row.annual_adjustment_percent = Decimal("5.00")
    row.apply_monthly_adjustment = False
    row.apply_monthly_costs_to_calendar = False
    row.last_adjustment_applied_at = datetime(2024, 3, 1, tzinfo=timezone.utc)
    row.custom_seasons = [
        {
            "name": "Carnaval",
            "start_month": 2,
            "start_day": 28,
            "end_month": 3,
            "end_day": 5,
            "multiplier": "1.8",
        }
    ]
    return row
