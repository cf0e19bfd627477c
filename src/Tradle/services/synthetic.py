"""Synthetic daily price rows used when the data vendor cannot deliver.

The walk is a 2%-volatility random walk with a weak pull back towards a
per-ticker base price, one row per weekday. Draws come from a seeded
generator derived from the ticker and the window, so the same failed fetch
always yields the same rows.
"""

from __future__ import annotations

import datetime
import math
from typing import Final

from Tradle.models.market_data import RawPricePoint
from Tradle.simulation._rounding import round_cents
from Tradle.simulation.seeded import SeededRandom

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BASE_PRICE_OFFSET: Final[float] = 50.0
BASE_PRICE_SPREAD: Final[int] = 400

DAILY_VOLATILITY: Final[float] = 0.02
MEAN_REVERSION_RATE: Final[float] = 0.001
PRICE_FLOOR: Final[float] = 10.0

OPEN_CLOSE_JITTER: Final[float] = 0.01
HIGH_LOW_SPREAD: Final[float] = 0.02

VOLUME_BASE: Final[int] = 1_000_000
VOLUME_SPREAD: Final[int] = 10_000_000

# Saturday and Sunday in date.weekday()
_WEEKEND: Final[frozenset[int]] = frozenset({5, 6})


def base_price_for(ticker: str) -> float:
    """Per-ticker anchor price in ``[50, 450)``."""
    return BASE_PRICE_OFFSET + sum(ord(char) for char in ticker) % BASE_PRICE_SPREAD


def fallback_seed(ticker: str, start_date: datetime.date, end_date: datetime.date) -> int:
    """Seed for the fallback walk of one ticker and window."""
    return sum(ord(char) for char in ticker) * 1_000_003 + start_date.toordinal() * 31 + (
        end_date.toordinal()
    )


def generate_fallback_series(
    ticker: str,
    start_date: datetime.date,
    end_date: datetime.date,
    rng: SeededRandom | None = None,
) -> list[RawPricePoint]:
    """Generate one OHLCV row per weekday in ``[start_date, end_date]``.

    Args:
        ticker: Symbol the series stands in for; sets the base price.
        start_date: First calendar day of the window (inclusive).
        end_date: Last calendar day of the window (inclusive).
        rng: Draw source. Defaults to :func:`fallback_seed` for the inputs.

    Returns:
        Rows in ascending date order; empty when ``end_date < start_date``.
    """
    if rng is None:
        rng = SeededRandom(fallback_seed(ticker, start_date, end_date))

    base_price = base_price_for(ticker)
    price = base_price
    rows: list[RawPricePoint] = []

    current = start_date
    while current <= end_date:
        if current.weekday() not in _WEEKEND:
            change = (rng.next() - 0.5) * 2 * DAILY_VOLATILITY
            reversion = (base_price - price) * MEAN_REVERSION_RATE
            price = max(PRICE_FLOOR, price * (1 + change + reversion))

            open_price = price * (1 + (rng.next() - 0.5) * OPEN_CLOSE_JITTER)
            close_price = price * (1 + (rng.next() - 0.5) * OPEN_CLOSE_JITTER)
            high = max(open_price, close_price) * (1 + rng.next() * HIGH_LOW_SPREAD)
            low = min(open_price, close_price) * (1 - rng.next() * HIGH_LOW_SPREAD)
            volume = math.floor(VOLUME_BASE + rng.next() * VOLUME_SPREAD)

            rows.append(
                RawPricePoint(
                    date=current,
                    open=round_cents(open_price),
                    high=round_cents(high),
                    low=round_cents(low),
                    close=round_cents(close_price),
                    volume=volume,
                )
            )
            price = close_price
        current += datetime.timedelta(days=1)

    return rows
