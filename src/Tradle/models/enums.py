"""StrEnum types for the challenge domain.

Values are lowercase strings. Use enum members in business logic, never raw
strings.
"""

from enum import StrEnum


class DataOrigin(StrEnum):
    """Whether a price series came from the data vendor or the fallback walk."""

    HISTORICAL = "historical"
    SYNTHETIC = "synthetic"


class Verdict(StrEnum):
    """Outcome of one player-vs-par comparison axis."""

    BETTER = "better"
    WORSE = "worse"
    NO_TRADES = "no_trades"


class RejectionReason(StrEnum):
    """Why the challenge assembler discarded a stock/date-range candidate."""

    INVALID_DATE_RANGE = "invalid_date_range"
    DATA_FAILURE = "data_failure"
    TARGET_NOT_ABOVE_CASH = "target_not_above_cash"
    RETURN_BELOW_MINIMUM = "return_below_minimum"


class BotStrategy(StrEnum):
    """Trading style a leaderboard bot was simulated with."""

    BUY_AND_HOLD = "buy_and_hold"
    MOMENTUM = "momentum"
    DCA = "dca"
    MEAN_REVERSION = "mean_reversion"
    RANDOM = "random"
