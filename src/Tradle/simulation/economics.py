"""Game economics: starting cash, win target, and target return.

The target depends on how well the reference strategy does, and the
reference strategy depends on the starting cash. That cycle is broken with
an explicit two-step pipeline::

    provisional = provisional_parameters(series)      # cash only
    par = simulate_par(series, provisional)
    params = finalize_parameters(provisional, par)    # cash + target

so :func:`~Tradle.simulation.par.simulate_par` only ever sees a complete
``GameParameters`` value.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Final

from Tradle.models.game import GameParameters, ParPerformance
from Tradle.models.market_data import CondensedPoint
from Tradle.simulation._rounding import round_half_up
from Tradle.simulation.par import simulate_par

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Starting cash buys roughly this many shares at the opening price
TARGET_INITIAL_SHARES: Final[int] = 20

# Cash and targets are rounded to this many currency units
ROUNDING_UNIT: Final[int] = 100

# The player has to beat par by this factor to win
TARGET_OVER_PAR: Final[float] = 1.2

# Used when there is no series to size the game from
FALLBACK_GAME_PARAMETERS: Final[GameParameters] = GameParameters(
    starting_cash=5000.0,
    starting_shares=0,
    target_value=6000.0,
    initial_stock_price=100.0,
    target_return_percentage=20.0,
)


def starting_cash_for(initial_price: float) -> float:
    """Cash that buys ~20 shares at *initial_price*, rounded to the nearest 100."""
    return float(
        round_half_up(initial_price * TARGET_INITIAL_SHARES / ROUNDING_UNIT) * ROUNDING_UNIT
    )


def provisional_parameters(series: Sequence[CondensedPoint]) -> GameParameters:
    """First pass: size the starting cash, leave the target unset (zero)."""
    initial_price = series[0].price
    return GameParameters(
        starting_cash=starting_cash_for(initial_price),
        starting_shares=0,
        target_value=0.0,
        initial_stock_price=initial_price,
        target_return_percentage=0.0,
    )


def finalize_parameters(provisional: GameParameters, par: ParPerformance) -> GameParameters:
    """Second pass: set the target 20% above par's final value.

    A zero starting cash (a sub-2.50 opening price) gets a 0% return rather
    than a division error; the assembler rejects such candidates anyway.
    """
    target_value = float(
        round_half_up(par.par_final_value * TARGET_OVER_PAR / ROUNDING_UNIT) * ROUNDING_UNIT
    )
    starting_cash = provisional.starting_cash
    if starting_cash > 0:
        target_return = float(
            round_half_up((target_value - starting_cash) / starting_cash * 100)
        )
    else:
        target_return = 0.0

    return provisional.model_copy(
        update={
            "target_value": target_value,
            "target_return_percentage": target_return,
        }
    )


def calculate_game_parameters(series: Sequence[CondensedPoint]) -> GameParameters:
    """Derive the full ``GameParameters`` for a condensed series.

    An empty series yields :data:`FALLBACK_GAME_PARAMETERS`.
    """
    if not series:
        logger.warning("Empty condensed series; using fallback game parameters")
        return FALLBACK_GAME_PARAMETERS

    provisional = provisional_parameters(series)
    provisional_par = simulate_par(series, provisional)
    params = finalize_parameters(provisional, provisional_par)

    logger.debug(
        "Economics: cash=%.0f target=%.0f return=%.0f%% (provisional par %.2f)",
        params.starting_cash,
        params.target_value,
        params.target_return_percentage,
        provisional_par.par_final_value,
    )
    return params


def evaluate_economics(
    series: Sequence[CondensedPoint],
) -> tuple[GameParameters, ParPerformance]:
    """Return finalized parameters and the par run against them."""
    params = calculate_game_parameters(series)
    return params, simulate_par(series, params)
