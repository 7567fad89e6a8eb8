"""
Holiday table integration (BrasilAPI).

Fetches national holidays per year from the public BrasilAPI endpoint::

    GET {holiday_api_base_url}/feriados/v1/{year}
    -> [{"date": "2025-01-01", "name": "Confraternização mundial", "type": "national"}, ...]

HTTP calls use httpx with retry logic (3 attempts, exponential backoff) on
server errors, timeouts and connection errors.

The pricing engine treats the holiday table as optional input: when a year
cannot be fetched, ``get_holidays`` logs a warning and returns no holidays
for that year instead of failing the calendar request.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Optional

import httpx

from src.core.config import settings
from src.services.seasonResolver import Holiday, HolidayType

logger = logging.getLogger(__name__)

_INITIAL_BACKOFF_SECONDS = 0.5  # doubles each retry: 0.5, 1.0, 2.0


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------


class HolidayApiError(Exception):
    """Raised when the holiday API fails after all retries or returns a
    payload that cannot be parsed."""

    def __init__(self, message: str, status: str | None = None, raw: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.raw = raw


# ---------------------------------------------------------------------------
# Per-year cache and test override
# ---------------------------------------------------------------------------

_cache: dict[int, list[Holiday]] = {}
_override_holidays: Optional[list[Holiday]] = None


def clear_holiday_cache() -> None:
    """Clear the in-memory holiday cache.  Useful in tests."""
    _cache.clear()
    logger.info("Holiday cache cleared")


def set_holiday_override(holidays: Optional[list[Holiday]]) -> None:
    """Serve a fixed holiday list instead of calling the API.

    Pass None to clear the override.
    """
    global _override_holidays
    _override_holidays = list(holidays) if holidays is not None else None
    if holidays is not None:
        logger.info("Holiday override set: %d holidays", len(_override_holidays))
    else:
        logger.info("Holiday override cleared")


# ---------------------------------------------------------------------------
# Internal HTTP helpers
# ---------------------------------------------------------------------------


async def _request_with_retry(client: httpx.AsyncClient, url: str) -> Any:
    """GET ``url`` and return parsed JSON, retrying transient failures.

    4xx responses are not retried.

    Raises:
        HolidayApiError: After all retries are exhausted or on a client error.
    """
    max_retries = max(settings.holiday_api_max_retries, 1)
    last_exception: Exception | None = None
    backoff = _INITIAL_BACKOFF_SECONDS

    for attempt in range(1, max_retries + 1):
        try:
            response = await client.get(url, timeout=settings.holiday_api_timeout_seconds)

            if 400 <= response.status_code < 500:
                raise HolidayApiError(
                    f"Holiday API client error: HTTP {response.status_code}",
                    status=str(response.status_code),
                    raw=response.text,
                )

            if response.status_code >= 500:
                last_exception = HolidayApiError(
                    f"Holiday API server error: HTTP {response.status_code}",
                    status=str(response.status_code),
                    raw=response.text,
                )
                logger.warning(
                    "Holiday API server error on attempt %d/%d: HTTP %d",
                    attempt,
                    max_retries,
                    response.status_code,
                )
                if attempt < max_retries:
                    await asyncio.sleep(backoff)
                    backoff *= 2
                continue

            return response.json()

        except (httpx.TimeoutException, httpx.ConnectError) as exc:
            last_exception = exc
            logger.warning(
                "Holiday API transport error on attempt %d/%d: %s",
                attempt,
                max_retries,
                exc,
            )
            if attempt < max_retries:
                await asyncio.sleep(backoff)
                backoff *= 2

    raise HolidayApiError(
        f"Holiday API request failed after {max_retries} attempts",
        raw=str(last_exception),
    )


def _parse_holidays(payload: Any, year: int) -> list[Holiday]:
    if not isinstance(payload, list):
        raise HolidayApiError(
            f"Unexpected holiday payload for {year}: expected a list",
            raw=payload,
        )
    holidays: list[Holiday] = []
    for entry in payload:
        try:
            holidays.append(
                Holiday(
                    date=date.fromisoformat(str(entry["date"])[:10]),
                    name=str(entry.get("name", "")),
                    type=HolidayType.parse(entry.get("type")),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed holiday entry %r: %s", entry, exc)
    return holidays


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def fetch_year_holidays(year: int, client: httpx.AsyncClient | None = None) -> list[Holiday]:
    """Fetch one year's holidays from the API (no cache, no fallback).

    Raises:
        HolidayApiError: On transport failure or an unparseable payload.
    """
    url = f"{settings.holiday_api_base_url.rstrip('/')}/feriados/v1/{year}"
    if client is not None:
        payload = await _request_with_retry(client, url)
    else:
        async with httpx.AsyncClient() as owned_client:
            payload = await _request_with_retry(owned_client, url)
    return _parse_holidays(payload, year)


async def get_holidays(start_year: int, end_year: int) -> list[Holiday]:
    """Holidays for every year in ``[start_year, end_year]``, sorted by date.

    A year that cannot be fetched contributes no holidays; the failure is
    logged and not raised.
    """
    if _override_holidays is not None:
        return sorted(
            (h for h in _override_holidays if start_year <= h.date.year <= end_year),
            key=lambda h: h.date,
        )

    holidays: list[Holiday] = []
    async with httpx.AsyncClient() as client:
        for year in range(start_year, end_year + 1):
            if settings.holiday_cache_enabled and year in _cache:
                holidays.extend(_cache[year])
                continue
            try:
                year_holidays = await fetch_year_holidays(year, client=client)
            except HolidayApiError as exc:
                logger.warning(
                    "Holiday table unavailable for %d, pricing without holidays: %s",
                    year,
                    exc,
                )
                continue
            if settings.holiday_cache_enabled:
                _cache[year] = year_holidays
            holidays.extend(year_holidays)

    holidays.sort(key=lambda h: h.date)
    return holidays
