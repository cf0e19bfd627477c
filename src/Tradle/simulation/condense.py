"""Condense an arbitrary-length daily price series into the 300-point game buffer.

Short series are upsampled by linear interpolation; long series are
downsampled by proportional sampling with a small jitter so that the
playback does not alias on a perfectly uniform grid. Whatever happens, the
result is exactly :data:`CHALLENGE_POINTS` points with timestamps 0..299.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Final

from Tradle.models.challenge import CHALLENGE_POINTS
from Tradle.models.market_data import CondensedPoint, RawPricePoint
from Tradle.simulation._rounding import round_cents
from Tradle.simulation.seeded import SeededRandom

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Sampling jitter: floor((u - 0.5) * 4) lands in -2..+1
JITTER_SPAN: Final[int] = 4

# Synthetic walk used when there is no raw data at all
SYNTHETIC_BASE_PRICE: Final[float] = 100.0
SYNTHETIC_PRICE_FLOOR: Final[float] = 50.0
SYNTHETIC_STEP: Final[float] = 2.0

# Linear fallback anchored to the raw endpoints
LINEAR_NOISE_FRACTION: Final[float] = 0.02
LINEAR_PRICE_FLOOR: Final[float] = 10.0

FALLBACK_VOLUME_BASE: Final[int] = 1_000_000
FALLBACK_VOLUME_SPREAD: Final[int] = 5_000_000


def condense(
    raw_prices: Sequence[RawPricePoint],
    rng: SeededRandom | None = None,
    points: int = CHALLENGE_POINTS,
) -> list[CondensedPoint]:
    """Resample *raw_prices* into exactly *points* condensed points.

    Args:
        raw_prices: Daily rows ordered ascending by date (any length).
        rng: Source for sampling jitter and fallback noise. Defaults to a
            generator seeded from the series itself, so the same input
            always condenses the same way.
        points: Output length (300 for a 60-second game).

    Returns:
        Exactly *points* ``CondensedPoint`` models. Never raises.
    """
    if rng is None:
        rng = SeededRandom(_series_seed(raw_prices))

    if not raw_prices:
        logger.warning("Empty raw series; generating a synthetic random walk")
        return fallback_condensed_series(raw_prices, rng, points)

    try:
        if len(raw_prices) <= points:
            condensed = interpolate_series(raw_prices, points)
        else:
            condensed = sample_series(raw_prices, rng, points)

        while len(condensed) < points:
            last = condensed[-1]
            condensed.append(
                CondensedPoint(timestamp=len(condensed), price=last.price, volume=last.volume)
            )
        return condensed[:points]
    except Exception:  # noqa: BLE001
        logger.exception(
            "Condensing %d raw rows failed; using linear fallback series",
            len(raw_prices),
        )
        return fallback_condensed_series(raw_prices, rng, points)


def interpolate_series(
    raw_prices: Sequence[RawPricePoint],
    points: int = CHALLENGE_POINTS,
) -> list[CondensedPoint]:
    """Upsample by linear interpolation of close price and volume.

    Source index for target ``i`` is ``i * (len - 1) / (points - 1)``. Exact
    integer positions copy the row; others interpolate between the
    neighbouring rows, price rounded to cents and volume to a whole number.
    """
    condensed: list[CondensedPoint] = []
    source_length = len(raw_prices)

    for i in range(points):
        source_index = (i * (source_length - 1)) / (points - 1)
        lower_index = math.floor(source_index)
        upper_index = math.ceil(source_index)

        if lower_index == upper_index:
            row = raw_prices[lower_index]
            condensed.append(CondensedPoint(timestamp=i, price=row.close, volume=row.volume))
            continue

        lower = raw_prices[lower_index]
        upper = raw_prices[upper_index]
        fraction = source_index - lower_index
        price = lower.close + (upper.close - lower.close) * fraction
        volume = math.floor(lower.volume + (upper.volume - lower.volume) * fraction + 0.5)
        condensed.append(CondensedPoint(timestamp=i, price=round_cents(price), volume=volume))

    return condensed


def sample_series(
    raw_prices: Sequence[RawPricePoint],
    rng: SeededRandom,
    points: int = CHALLENGE_POINTS,
) -> list[CondensedPoint]:
    """Downsample by proportional sampling with +/-2 rows of jitter.

    The first and last raw rows are always the first and last condensed
    points, so the game opens and closes on the real endpoint prices.
    Jittered indices are clamped to stay after the previous pick and to leave
    one distinct row for every remaining target, so playback never steps
    backwards in time.
    """
    source_length = len(raw_prices)
    first = raw_prices[0]
    last = raw_prices[-1]

    condensed = [CondensedPoint(timestamp=0, price=first.close, volume=first.volume)]
    previous_index = 0

    for i in range(1, points - 1):
        progress = i / (points - 1)
        source_index = math.floor(progress * (source_length - 1) + 0.5)
        jitter = math.floor((rng.next() - 0.5) * JITTER_SPAN)
        highest = source_length - 1 - (points - 1 - i)
        adjusted = max(previous_index + 1, min(highest, source_index + jitter))
        previous_index = adjusted
        row = raw_prices[adjusted]
        condensed.append(CondensedPoint(timestamp=i, price=row.close, volume=row.volume))

    condensed.append(CondensedPoint(timestamp=points - 1, price=last.close, volume=last.volume))
    return condensed


def fallback_condensed_series(
    raw_prices: Sequence[RawPricePoint],
    rng: SeededRandom,
    points: int = CHALLENGE_POINTS,
) -> list[CondensedPoint]:
    """Build a playable series when condensation is impossible.

    With no raw data: a random walk from 100 with unit-sized steps, floored
    at 50. Otherwise: a straight line from the first to the last close with
    +/-1% noise (relative to the first close), floored at 10.
    """
    condensed: list[CondensedPoint] = []

    if not raw_prices:
        price = SYNTHETIC_BASE_PRICE
        for i in range(points):
            change = (rng.next() - 0.5) * SYNTHETIC_STEP
            price = max(SYNTHETIC_PRICE_FLOOR, price + change)
            condensed.append(
                CondensedPoint(timestamp=i, price=round_cents(price), volume=_fallback_volume(rng))
            )
        return condensed

    start_price = raw_prices[0].close
    end_price = raw_prices[-1].close
    price_range = end_price - start_price

    for i in range(points):
        progress = i / (points - 1)
        base_price = start_price + price_range * progress
        noise = (rng.next() - 0.5) * (start_price * LINEAR_NOISE_FRACTION)
        price = max(LINEAR_PRICE_FLOOR, base_price + noise)
        condensed.append(
            CondensedPoint(timestamp=i, price=round_cents(price), volume=_fallback_volume(rng))
        )
    return condensed


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _fallback_volume(rng: SeededRandom) -> int:
    return math.floor(FALLBACK_VOLUME_BASE + rng.next() * FALLBACK_VOLUME_SPREAD)


def _series_seed(raw_prices: Sequence[RawPricePoint]) -> int:
    """Derive a stable seed from a series' length and endpoints."""
    if not raw_prices:
        return 0
    first = raw_prices[0]
    last = raw_prices[-1]
    return (
        len(raw_prices)
        + first.date.toordinal()
        + last.date.toordinal()
        + round(first.close * 100)
        + round(last.close * 100)
    )
