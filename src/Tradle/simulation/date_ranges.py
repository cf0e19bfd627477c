"""Seeded historical date-range generation.

:func:`generate_date_range` is a pure generator: it never retries. The
caller decides how many seeds to try; :func:`resolve_date_range` is the
standard policy (``seed + attempt`` up to ten times, then a safe default).
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Final

from Tradle.models.game import DateRange
from Tradle.simulation.seeded import SeededRandom

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

EARLIEST_START_YEAR: Final[int] = 2012
LATEST_START_YEAR: Final[int] = 2020
MIN_DURATION_YEARS: Final[int] = 1
MAX_DURATION_YEARS: Final[int] = 5
MAX_START_DAY: Final[int] = 28

LATEST_END_DATE: Final[datetime.date] = datetime.date(2025, 12, 31)

TRADING_DAYS_PER_YEAR: Final[int] = 252
CALENDAR_DAYS_PER_YEAR: Final[int] = 365

DEFAULT_MAX_ATTEMPTS: Final[int] = 10

FALLBACK_DATE_RANGE: Final[DateRange] = DateRange(
    start_date=datetime.date(2021, 12, 31),
    end_date=datetime.date(2023, 12, 31),
    trading_days_estimate=504,
)


def estimate_trading_days(start_date: datetime.date, end_date: datetime.date) -> int:
    """Approximate trading days in a window as ``ceil(days * 252 / 365)``."""
    calendar_days = (end_date - start_date).days
    return math.ceil(calendar_days * TRADING_DAYS_PER_YEAR / CALENDAR_DAYS_PER_YEAR)


def generate_date_range(seed: int) -> DateRange:
    """Draw a start date and a 1-5 year duration from *seed*.

    Draw order is start year, month, day, duration. The end date is clamped
    to :data:`LATEST_END_DATE`, so late starts may produce short windows that
    fail :attr:`DateRange.is_valid`.
    """
    rng = SeededRandom(seed)
    start_year = rng.next_int(EARLIEST_START_YEAR, LATEST_START_YEAR)
    start_month = rng.next_int(1, 12)
    start_day = rng.next_int(1, MAX_START_DAY)
    duration_years = rng.next_int(MIN_DURATION_YEARS, MAX_DURATION_YEARS)

    start_date = datetime.date(start_year, start_month, start_day)
    end_date = min(start_date.replace(year=start_year + duration_years), LATEST_END_DATE)

    return DateRange(
        start_date=start_date,
        end_date=end_date,
        trading_days_estimate=estimate_trading_days(start_date, end_date),
    )


def resolve_date_range(seed: int, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> DateRange:
    """Return the first valid range among ``seed + 0 .. seed + max_attempts - 1``.

    Falls back to :data:`FALLBACK_DATE_RANGE` when none qualifies.
    """
    for attempt in range(max_attempts):
        candidate = generate_date_range(seed + attempt)
        if candidate.is_valid:
            return candidate
    logger.warning(
        "No valid date range in %d attempts from seed %d; using fallback range",
        max_attempts,
        seed,
    )
    return FALLBACK_DATE_RANGE
