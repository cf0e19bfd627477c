"""Chart tradability: how much trading opportunity a condensed series offers."""

from collections.abc import Sequence
from typing import Final, Literal

from Tradle.models.market_data import CondensedPoint

MIN_POINTS: Final[int] = 20
EDGE_MARGIN: Final[int] = 10
WINDOW: Final[int] = 6
TREND_THRESHOLD: Final[float] = 0.02
TREND_CHANGES_FOR_FULL_SCORE: Final[int] = 10

VOLATILITY_WEIGHT: Final[float] = 0.7
TREND_WEIGHT: Final[float] = 0.3

type _Trend = Literal["up", "down", "neutral"]


def analyze_tradability(series: Sequence[CondensedPoint]) -> float:
    """Score a series in ``[0, 1]`` from its range and its trend reversals.

    Volatility is ``(max - min) / initial``. A trend change is counted when
    the mean of the six points ending at ``i`` and the mean of the six
    starting at ``i`` differ by more than 2% in a new direction.
    """
    if len(series) < MIN_POINTS:
        return 0.0

    prices = [point.price for point in series]
    initial_price = prices[0]
    if initial_price <= 0:
        return 0.0

    volatility_score = (max(prices) - min(prices)) / initial_price

    trend_changes = 0
    current_trend: _Trend = "neutral"
    for i in range(EDGE_MARGIN, len(prices) - EDGE_MARGIN):
        recent_avg = sum(prices[i - WINDOW + 1 : i + 1]) / WINDOW
        future_avg = sum(prices[i : i + WINDOW]) / WINDOW
        change = (future_avg - recent_avg) / recent_avg

        new_trend: _Trend = "neutral"
        if change > TREND_THRESHOLD:
            new_trend = "up"
        elif change < -TREND_THRESHOLD:
            new_trend = "down"

        if new_trend != "neutral" and new_trend != current_trend:
            trend_changes += 1
            current_trend = new_trend

    trend_score = min(1.0, trend_changes / TREND_CHANGES_FOR_FULL_SCORE)
    return min(1.0, volatility_score * VOLATILITY_WEIGHT + trend_score * TREND_WEIGHT)
