"""Deterministic random sources.

Every draw in challenge generation comes from a :class:`SeededRandom` passed
explicitly by the caller, so today's challenge and today's bot leaderboard
reproduce exactly from the date alone. Symbol picks use the one-shot
:func:`seeded_random_from_seed` hash instead of the LCG.
"""

from __future__ import annotations

import datetime
import math
from typing import Final

LCG_MULTIPLIER: Final[int] = 9301
LCG_INCREMENT: Final[int] = 49297
LCG_MODULUS: Final[int] = 233280

# Scale applied to sin(seed) before taking the fractional part
SIN_HASH_SCALE: Final[float] = 10000.0


class SeededRandom:
    """LCG random source: ``seed = (seed * 9301 + 49297) % 233280``.

    Two instances built from the same seed and called in the same order
    produce identical sequences. There is no hidden entropy.
    """

    def __init__(self, seed: int | float) -> None:
        self._seed = seed

    @property
    def seed(self) -> int | float:
        """Current internal state (advances with every draw)."""
        return self._seed

    def next(self) -> float:
        """Return a float in [0, 1)."""
        self._seed = (self._seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self._seed / LCG_MODULUS

    def next_int(self, low: int, high: int) -> int:
        """Return an integer in ``[low, high]`` (both inclusive)."""
        return math.floor(self.next() * (high - low + 1)) + low

    def next_gaussian(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        """Box-Muller normal draw; consumes two uniform draws."""
        u1 = self.next()
        u2 = self.next()
        # u1 == 0 only when the state lands exactly on 0; keep log() finite
        if u1 <= 0.0:
            u1 = 1.0 / LCG_MODULUS
        z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return z0 * std_dev + mean


def seeded_random_from_seed(seed: int | float) -> float:
    """One-shot hash of *seed* into [0, 1): ``frac(sin(seed) * 10000)``.

    The LCG is linear in its seed, so consecutive dates would walk a catalog
    in order; the sine hash scatters neighbouring seeds instead.
    """
    x = math.sin(seed) * SIN_HASH_SCALE
    return x - math.floor(x)


def daily_seed(day: datetime.date) -> int:
    """Seed for a calendar date: ``YYYYMMDD`` as an integer."""
    return day.year * 10000 + day.month * 100 + day.day
