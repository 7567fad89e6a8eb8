"""
E2E test fixtures for the rental pricing backend.

Provides:
- An in-process FastAPI test app with the pricing and calendar routes
- httpx AsyncClient wired via ASGI transport (no network needed)
- An async SQLite database session (in-memory) per test
- Seed data: one priced property with a reservation, one unpriced property

The BrasilAPI holiday source is replaced with a fixed holiday list via
``set_holiday_override`` so the full route -> service -> DB flow runs
offline.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from src.integrations.holidayApi import set_holiday_override
from src.models import Base, Property, PropertyPricingConfig, Reservation
from src.services.seasonResolver import Holiday, HolidayType


@compiles(JSONB, "sqlite")
def compile_jsonb_sqlite(type_, compiler, **kw):
    return "JSON"


# UUIDs are bound as 32-char hex; CHAR keeps TEXT affinity so all-digit
# values are not coerced to numbers.
@compiles(UUID, "sqlite")
def compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(32)"


# ---------------------------------------------------------------------------
# Test IDs (stable across tests so cross-references work)
# ---------------------------------------------------------------------------

PRICED_PROPERTY_ID = uuid.UUID("aaaaaaaa-1111-4111-8111-111111111111")
UNPRICED_PROPERTY_ID = uuid.UUID("bbbbbbbb-2222-4222-8222-222222222222")
RESERVATION_ID = uuid.UUID("cccccccc-3333-4333-8333-333333333333")
UNKNOWN_PROPERTY_ID = uuid.UUID("dddddddd-9999-4999-8999-999999999999")


# ---------------------------------------------------------------------------
# Async engine + session (in-memory SQLite)
# ---------------------------------------------------------------------------

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def _test_engine():
    # StaticPool keeps a single connection so the in-memory database survives
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)

    # SQLite does not enforce foreign keys by default
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_fk(dbapi_conn, _):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(_test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session inside a transaction that is rolled back afterwards."""
    session_factory = async_sessionmaker(
        bind=_test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        await session.begin()
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

async def _seed_data(db: AsyncSession) -> None:
    """Insert minimum seed data for E2E tests."""
    db.add_all(
        [
            Property(id=PRICED_PROPERTY_ID, name="Casa da Praia", address="Rua do Sol, 10"),
            Property(id=UNPRICED_PROPERTY_ID, name="Apartamento Centro"),
        ]
    )
    await db.flush()

    db.add(
        PropertyPricingConfig(
            property_id=PRICED_PROPERTY_ID,
            min_value=150,
            weekday_normal_value=200,
            weekend_value=300,
            holiday_multiplier=Decimal("2"),
            holiday_value_manual=None,
            annual_adjustment_percent=Decimal("5"),
            apply_monthly_adjustment=False,
            apply_monthly_costs_to_calendar=False,
            custom_seasons=[],
        )
    )
    db.add(
        Reservation(
            id=RESERVATION_ID,
            property_id=PRICED_PROPERTY_ID,
            checkin_date=date(2025, 7, 10),
            checkout_date=date(2025, 7, 13),
            guest_name="Maria Silva",
            source="airbnb",
        )
    )
    await db.flush()


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """A database session with seed data already inserted."""
    await _seed_data(db_session)
    return db_session


# ---------------------------------------------------------------------------
# Holiday source
# ---------------------------------------------------------------------------

@pytest.fixture
def july_holiday_table():
    """Serve a single holiday on 2025-07-04 instead of calling BrasilAPI."""
    set_holiday_override(
        [Holiday(date=date(2025, 7, 4), name="Test Day", type=HolidayType.NATIONAL)]
    )
    yield
    set_holiday_override(None)


@pytest.fixture
def holiday_outage():
    """Simulate the holiday source being down (no holidays at all)."""
    set_holiday_override([])
    yield
    set_holiday_override(None)


# ---------------------------------------------------------------------------
# FastAPI test application
# ---------------------------------------------------------------------------

def _create_test_app(db_session_override: AsyncSession):
    """Build a FastAPI app with the API routes registered and the DB
    dependency overridden to use the test session."""
    from fastapi import FastAPI

    from src.api.deps import get_db
    from src.api.routes.calendar import router as calendar_router
    from src.api.routes.pricing import router as pricing_router

    app = FastAPI(title="Rental Pricing Test")

    async def _override_get_db():
        yield db_session_override

    app.dependency_overrides[get_db] = _override_get_db

    app.include_router(pricing_router, prefix="/api/v1")
    app.include_router(calendar_router, prefix="/api/v1")

    return app


@pytest_asyncio.fixture
async def client(seeded_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the test app via ASGI transport."""
    app = _create_test_app(seeded_db)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
