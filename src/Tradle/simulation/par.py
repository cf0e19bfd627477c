"""Par performance: the reference momentum trader every player is graded against.

The strategy is a fixed heuristic, not an optimizer. It watches for runs of
strictly rising or falling prices, buys a slice of cash into upward momentum
and trims the position on downward momentum, then liquidates on the last
tick. The function is pure: the same series and parameters always produce
the same :class:`ParPerformance`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Final

from Tradle.models.game import GameParameters, ParPerformance
from Tradle.models.market_data import CondensedPoint

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Strategy constants
# ---------------------------------------------------------------------------

# Ticks needed before a three-point trend can be read
WARMUP_TICKS: Final[int] = 3

# Consecutive monotonic ticks that trigger a trade
MOMENTUM_THRESHOLD: Final[int] = 2

BUY_CASH_FRACTION: Final[float] = 0.3
SELL_SHARE_FRACTION: Final[float] = 0.4

# Stop buying once the position is worth this share of starting cash
MAX_POSITION_FRACTION: Final[float] = 0.7

# Efficiency is centred on 0.5 when par ties buy-and-hold
EFFICIENCY_MIDPOINT: Final[float] = 0.5


def simulate_par(
    series: Sequence[CondensedPoint],
    params: GameParameters,
) -> ParPerformance:
    """Replay *series* through the momentum heuristic.

    Rules, evaluated on ticks ``3 .. len - 2``:

    - ``rising`` counts consecutive ticks where the last three prices are
      strictly increasing, ``falling`` likewise for strictly decreasing;
      any break resets both.
    - Buy: ``rising >= 2``, cash left after the slice, and the position worth
      less than 70% of starting cash. Spend 30% of cash on whole shares.
    - Otherwise sell: holding shares and ``falling >= 2``. Sell 40% of the
      position (whole shares).

    Remaining shares are sold at the final price.

    Args:
        series: Condensed playback series.
        params: Complete game parameters; only ``starting_cash`` drives the
            simulation.

    Returns:
        The reference strategy's ``ParPerformance``.
    """
    starting_cash = params.starting_cash

    if not series:
        return ParPerformance(
            par_average_buy_price=params.initial_stock_price,
            par_total_shares_bought=0,
            par_final_value=starting_cash,
            par_cash_remaining=starting_cash,
            efficiency=0.0,
            starting_cash=starting_cash,
        )

    prices = [point.price for point in series]
    initial_price = prices[0]
    final_price = prices[-1]

    cash = starting_cash
    shares = 0
    total_shares_bought = 0
    total_cost_basis = 0.0
    rising = 0
    falling = 0
    max_position_value = starting_cash * MAX_POSITION_FRACTION

    for i in range(WARMUP_TICKS, len(prices) - 1):
        current = prices[i]
        previous = prices[i - 1]
        before_previous = prices[i - 2]

        if current > previous > before_previous:
            rising += 1
            falling = 0
        elif current < previous < before_previous:
            falling += 1
            rising = 0
        else:
            rising = 0
            falling = 0

        cash_per_trade = cash * BUY_CASH_FRACTION
        position_value = shares * current

        if (
            rising >= MOMENTUM_THRESHOLD
            and cash > cash_per_trade
            and position_value < max_position_value
        ):
            shares_to_buy = math.floor(cash_per_trade / current)
            if shares_to_buy > 0 and shares_to_buy * current <= cash:
                cost = shares_to_buy * current
                cash -= cost
                shares += shares_to_buy
                total_shares_bought += shares_to_buy
                total_cost_basis += cost
        elif shares > 0 and falling >= MOMENTUM_THRESHOLD:
            shares_to_sell = math.floor(shares * SELL_SHARE_FRACTION)
            if shares_to_sell > 0:
                cash += shares_to_sell * current
                shares -= shares_to_sell

    if shares > 0:
        cash += shares * final_price
        shares = 0

    average_buy_price = (
        total_cost_basis / total_shares_bought if total_shares_bought > 0 else initial_price
    )
    efficiency = compute_efficiency(cash, starting_cash, initial_price, final_price)

    logger.debug(
        "Par simulation: final=%.2f bought=%d avg_buy=%.2f efficiency=%.3f",
        cash,
        total_shares_bought,
        average_buy_price,
        efficiency,
    )

    return ParPerformance(
        par_average_buy_price=average_buy_price,
        par_total_shares_bought=total_shares_bought,
        par_final_value=cash,
        par_cash_remaining=cash,
        efficiency=efficiency,
        starting_cash=starting_cash,
    )


def buy_and_hold_value(starting_cash: float, initial_price: float, final_price: float) -> float:
    """Final value of buying as many whole shares as possible and holding."""
    if initial_price <= 0:
        return starting_cash
    shares = math.floor(starting_cash / initial_price)
    return shares * final_price + (starting_cash - shares * initial_price)


def compute_efficiency(
    final_value: float,
    starting_cash: float,
    initial_price: float,
    final_price: float,
) -> float:
    """Map par's edge over buy-and-hold into ``[0, 1]``."""
    if starting_cash <= 0:
        return 0.0
    baseline = buy_and_hold_value(starting_cash, initial_price, final_price)
    raw = (final_value - baseline) / starting_cash + EFFICIENCY_MIDPOINT
    return max(0.0, min(1.0, raw))
