"""Game economics, par performance, and player scoring models."""

import datetime
import math

from pydantic import BaseModel, ConfigDict, computed_field

from Tradle.models.enums import Verdict

# Minimum calendar-to-trading-day estimate for a range to yield a playable series
MIN_TRADING_DAYS: int = 250


class DateRange(BaseModel):
    """A historical window the challenge's prices are drawn from."""

    model_config = ConfigDict(frozen=True)

    start_date: datetime.date
    end_date: datetime.date
    trading_days_estimate: int

    @property
    def is_valid(self) -> bool:
        """True when the window holds enough history for a 300-point game."""
        return self.trading_days_estimate >= MIN_TRADING_DAYS


class GameParameters(BaseModel):
    """Cash, target, and opening price the player starts a challenge with."""

    model_config = ConfigDict(frozen=True)

    starting_cash: float
    starting_shares: int = 0
    target_value: float
    initial_stock_price: float
    target_return_percentage: float


class ParPerformance(BaseModel):
    """Outcome of replaying the reference momentum strategy over a series.

    ``par_profit_per_trade`` is NaN when the strategy never bought; callers
    must special-case it.
    """

    model_config = ConfigDict(frozen=True)

    par_average_buy_price: float
    par_total_shares_bought: int
    par_final_value: float
    par_cash_remaining: float
    efficiency: float
    strategy: str = "balanced"
    starting_cash: float

    @computed_field  # type: ignore[prop-decorator]
    @property
    def par_profit_per_trade(self) -> float:
        """Profit per share bought; NaN when no shares were bought."""
        if self.par_total_shares_bought <= 0:
            return math.nan
        return (self.par_final_value - self.starting_cash) / self.par_total_shares_bought


class PlayerStats(BaseModel):
    """What the game loop reports about a finished player session."""

    model_config = ConfigDict(frozen=True)

    final_value: float
    average_buy_price: float
    total_shares_bought: int

    def profit_per_trade(self, starting_cash: float) -> float:
        """Player PPT; 0 when the player never bought."""
        if self.total_shares_bought <= 0:
            return 0.0
        return (self.final_value - starting_cash) / self.total_shares_bought


class ScoreCard(BaseModel):
    """Three-way player-vs-par comparison shown at the end of a game."""

    model_config = ConfigDict(frozen=True)

    buy_price: Verdict
    profit_per_trade: Verdict
    target_met: bool
    player_profit_per_trade: float
    return_percentage: float
