"""Player-vs-par grading.

Three axes, matching the end-of-game summary:

1. Average buy price: lower is better (``<=`` par counts as better).
2. Profit per trade: higher is better (``>=`` par, or par NaN, counts as
   better).
3. Target: met when the final value reaches ``target_value``.

A player who never bought gets ``NO_TRADES`` on the first two axes.
"""

import math
from typing import Final

from Tradle.models.enums import Verdict
from Tradle.models.game import GameParameters, ParPerformance, PlayerStats, ScoreCard

_VERDICT_MARKS: Final[dict[Verdict, str]] = {
    Verdict.BETTER: "\U0001f7e9",  # green square
    Verdict.WORSE: "\U0001f7e5",  # red square
    Verdict.NO_TRADES: "⬛",  # black square
}
_TARGET_MET_MARK: Final[str] = "✅"
_TARGET_MISSED_MARK: Final[str] = "❌"


def compare_to_par(
    player: PlayerStats,
    params: GameParameters,
    par: ParPerformance,
) -> ScoreCard:
    """Grade a finished session against the challenge's par performance."""
    player_ppt = player.profit_per_trade(params.starting_cash)

    if player.total_shares_bought <= 0:
        buy_verdict = Verdict.NO_TRADES
        ppt_verdict = Verdict.NO_TRADES
    else:
        buy_verdict = (
            Verdict.BETTER
            if player.average_buy_price <= par.par_average_buy_price
            else Verdict.WORSE
        )
        par_ppt = par.par_profit_per_trade
        ppt_verdict = (
            Verdict.BETTER
            if math.isnan(par_ppt) or player_ppt >= par_ppt
            else Verdict.WORSE
        )

    if params.starting_cash > 0:
        gain = player.final_value - params.starting_cash
        return_percentage = gain / params.starting_cash * 100
    else:
        return_percentage = 0.0

    return ScoreCard(
        buy_price=buy_verdict,
        profit_per_trade=ppt_verdict,
        target_met=player.final_value >= params.target_value,
        player_profit_per_trade=player_ppt,
        return_percentage=return_percentage,
    )


def share_text(
    scorecard: ScoreCard,
    player: PlayerStats,
    game_number: int,
) -> str:
    """Render the shareable result block, e.g. ``Tradle #12 <marks>``."""
    marks = (
        _VERDICT_MARKS[scorecard.buy_price]
        + _VERDICT_MARKS[scorecard.profit_per_trade]
        + (_TARGET_MET_MARK if scorecard.target_met else _TARGET_MISSED_MARK)
    )
    sign = "+" if scorecard.return_percentage >= 0 else ""
    lines = [
        f"Tradle #{game_number} {marks}",
        f"Final Value: ${player.final_value:,.2f} ({sign}{scorecard.return_percentage:.1f}%)",
    ]
    if player.total_shares_bought > 0:
        lines.append(f"PPT: ${scorecard.player_profit_per_trade:,.2f}")
    return "\n".join(lines)
