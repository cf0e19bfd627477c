"""Seeded leaderboard bots for a challenge day.

Each bot picks a trading style, replays the challenge's price series with
it, and has its gain scaled by a performance multiplier so that the field
clusters a little below par. A final pass guarantees a handful of winners.
Everything draws from one ``SeededRandom(day * 12345)`` so a day's field is
reproducible.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from typing import Final, NamedTuple

from Tradle.models.bots import BotEntry
from Tradle.models.challenge import Challenge
from Tradle.models.enums import BotStrategy
from Tradle.simulation._rounding import round_cents
from Tradle.simulation.bot_names import display_name
from Tradle.simulation.seeded import SeededRandom

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DAY_SEED_MULTIPLIER: Final[int] = 12345
DEFAULT_BOT_COUNT: Final[int] = 100

# Strategy roll thresholds (cumulative)
BUY_AND_HOLD_CUTOFF: Final[float] = 0.15
MOMENTUM_CUTOFF: Final[float] = 0.5
DCA_CUTOFF: Final[float] = 0.65
MEAN_REVERSION_CUTOFF: Final[float] = 0.8

# Buy-and-hold invests 90-100% of starting cash
BUY_AND_HOLD_MIN_RATIO: Final[float] = 0.9
BUY_AND_HOLD_RATIO_SPREAD: Final[float] = 0.1

# Performance multiplier ~ N(0.85, 0.25) clamped to [0.3, 1.5]
PERFORMANCE_MEAN: Final[float] = 0.85
PERFORMANCE_STD_DEV: Final[float] = 0.25
PERFORMANCE_MIN: Final[float] = 0.3
PERFORMANCE_MAX: Final[float] = 1.5

# No bot finishes below half its starting cash
FINAL_VALUE_FLOOR: Final[float] = 0.5

MEAN_REVERSION_WINDOW: Final[int] = 20
MEAN_REVERSION_BAND: Final[float] = 0.03

MIN_WINNERS: Final[int] = 3
MAX_WINNERS: Final[int] = 10
WINNER_BOOST_SPREAD: Final[float] = 0.10


class TradingResult(NamedTuple):
    """Raw outcome of replaying one strategy."""

    final_value: float
    avg_buy_price: float
    total_shares_bought: int
    num_trades: int


class _Book:
    """Cash/share ledger shared by the strategy simulations."""

    def __init__(self, starting_cash: float) -> None:
        self.cash = starting_cash
        self.shares = 0
        self.total_shares_bought = 0
        self.total_cost_basis = 0.0
        self.num_trades = 0

    def buy(self, amount: float, price: float) -> None:
        shares = math.floor(amount / price)
        if shares > 0:
            cost = shares * price
            self.cash -= cost
            self.shares += shares
            self.total_shares_bought += shares
            self.total_cost_basis += cost
            self.num_trades += 1

    def sell_fraction(self, fraction: float, price: float) -> None:
        shares = math.floor(self.shares * fraction)
        if shares > 0:
            self.cash += shares * price
            self.shares -= shares
            self.num_trades += 1

    def close(self, final_price: float, first_price: float) -> TradingResult:
        final_value = self.cash + self.shares * final_price
        avg_buy = (
            self.total_cost_basis / self.total_shares_bought
            if self.total_shares_bought > 0
            else first_price
        )
        return TradingResult(final_value, avg_buy, self.total_shares_bought, self.num_trades)


type StrategyFn = Callable[[Sequence[float], float, SeededRandom], TradingResult]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def buy_and_hold(
    prices: Sequence[float], starting_cash: float, rng: SeededRandom
) -> TradingResult:
    """Invest 90-100% of cash on the first tick and hold to the end."""
    initial_price = prices[0]
    ratio = BUY_AND_HOLD_MIN_RATIO + rng.next() * BUY_AND_HOLD_RATIO_SPREAD
    shares = math.floor(starting_cash * ratio / initial_price)
    remaining = starting_cash - shares * initial_price
    return TradingResult(shares * prices[-1] + remaining, initial_price, shares, 1)


def momentum(aggressiveness: float) -> StrategyFn:
    """Momentum trader whose thresholds and sizing scale with *aggressiveness* (0-1)."""
    threshold = max(1, math.floor(3 - aggressiveness))
    cash_fraction = 0.2 + aggressiveness * 0.15
    sell_fraction = 0.3 + aggressiveness * 0.2

    def _simulate(
        prices: Sequence[float], starting_cash: float, rng: SeededRandom
    ) -> TradingResult:
        book = _Book(starting_cash)
        rising = 0
        falling = 0
        for i in range(3, len(prices) - 1):
            current, previous, before = prices[i], prices[i - 1], prices[i - 2]
            if current > previous > before:
                rising += 1
                falling = 0
            elif current < previous < before:
                falling += 1
                rising = 0
            else:
                rising = 0
                falling = 0

            if rising >= threshold and book.cash > starting_cash * cash_fraction:
                book.buy(book.cash * cash_fraction, current)
            elif book.shares > 0 and falling >= threshold:
                book.sell_fraction(sell_fraction, current)
        return book.close(prices[-1], prices[0])

    return _simulate


def dollar_cost_average(
    prices: Sequence[float], starting_cash: float, rng: SeededRandom
) -> TradingResult:
    """Buy a fixed amount every 20-40 ticks, keeping one slice in reserve."""
    book = _Book(starting_cash)
    interval = rng.next_int(20, 40)
    num_buys = len(prices) // interval
    amount_per_buy = starting_cash / (num_buys + 1)
    for i in range(interval, len(prices), interval):
        if book.cash >= amount_per_buy:
            book.buy(amount_per_buy, prices[i])
    result = book.close(prices[-1], prices[0])
    return result._replace(num_trades=num_buys)


def mean_reversion(
    prices: Sequence[float], starting_cash: float, rng: SeededRandom
) -> TradingResult:
    """Buy 3% below the trailing 20-tick mean, trim 3% above it."""
    book = _Book(starting_cash)
    for i in range(MEAN_REVERSION_WINDOW, len(prices) - 1):
        current = prices[i]
        mean = sum(prices[i - MEAN_REVERSION_WINDOW : i]) / MEAN_REVERSION_WINDOW
        deviation = (current - mean) / mean
        if deviation < -MEAN_REVERSION_BAND and book.cash > starting_cash * 0.3:
            book.buy(book.cash * 0.3, current)
        elif book.shares > 0 and deviation > MEAN_REVERSION_BAND:
            book.sell_fraction(0.4, current)
    return book.close(prices[-1], prices[0])


def random_trader(
    prices: Sequence[float], starting_cash: float, rng: SeededRandom
) -> TradingResult:
    """Make 3-8 trades at random ticks, coin-flipping buy versus sell."""
    book = _Book(starting_cash)
    for _ in range(rng.next_int(3, 8)):
        current = prices[rng.next_int(10, len(prices) - 10)]
        if rng.next() > 0.5 and book.cash > starting_cash * 0.2:
            book.buy(book.cash * (0.2 + rng.next() * 0.3), current)
        elif book.shares > 0:
            book.sell_fraction(0.3 + rng.next() * 0.4, current)
    return book.close(prices[-1], prices[0])


# ---------------------------------------------------------------------------
# Field generation
# ---------------------------------------------------------------------------


def pick_strategy(rng: SeededRandom) -> tuple[BotStrategy, StrategyFn]:
    """Weighted strategy roll; momentum bots draw a gaussian aggressiveness."""
    roll = rng.next()
    if roll < BUY_AND_HOLD_CUTOFF:
        return BotStrategy.BUY_AND_HOLD, buy_and_hold
    if roll < MOMENTUM_CUTOFF:
        aggressiveness = max(0.0, min(1.0, rng.next_gaussian(0.5, 0.3)))
        return BotStrategy.MOMENTUM, momentum(aggressiveness)
    if roll < DCA_CUTOFF:
        return BotStrategy.DCA, dollar_cost_average
    if roll < MEAN_REVERSION_CUTOFF:
        return BotStrategy.MEAN_REVERSION, mean_reversion
    return BotStrategy.RANDOM, random_trader




def _num_tries(rng: SeededRandom) -> int:
    roll = rng.next()
    if roll < 0.6:
        return 1
    if roll < 0.85:
        return 2
    if roll < 0.95:
        return 3
    return 4


def generate_bot_entry(challenge: Challenge, rng: SeededRandom) -> BotEntry:
    """Simulate one bot against *challenge*."""
    prices = [point.price for point in challenge.price_data]
    starting_cash = challenge.game_parameters.starting_cash

    strategy, simulate = pick_strategy(rng)
    result = simulate(prices, starting_cash, rng)

    multiplier = max(
        PERFORMANCE_MIN,
        min(PERFORMANCE_MAX, rng.next_gaussian(PERFORMANCE_MEAN, PERFORMANCE_STD_DEV)),
    )
    adjusted_gain = (result.final_value - starting_cash) * multiplier
    final_value = max(starting_cash * FINAL_VALUE_FLOOR, starting_cash + adjusted_gain)
    ppt = (
        (final_value - starting_cash) / result.total_shares_bought
        if result.total_shares_bought > 0
        else 0.0
    )

    return BotEntry(
        day=challenge.day,
        name=display_name(rng),
        strategy=strategy,
        final_value=round_cents(final_value),
        percentage_change_of_value=round_cents(
            (final_value - starting_cash) / starting_cash * 100
        ),
        avg_buy=round_cents(result.avg_buy_price),
        ppt=round_cents(ppt),
        num_tries=_num_tries(rng),
    )


def generate_bot_entries(
    challenge: Challenge,
    count: int = DEFAULT_BOT_COUNT,
) -> list[BotEntry]:
    """Generate the day's bot field and guarantee 3-10 target winners.

    If too few bots reach ``target_value``, the best losers are lifted to
    100-110% of the target, with percentage change recomputed.
    """
    rng = SeededRandom(challenge.day * DAY_SEED_MULTIPLIER)
    entries = [generate_bot_entry(challenge, rng) for _ in range(count)]

    target_value = challenge.game_parameters.target_value
    starting_cash = challenge.game_parameters.starting_cash
    min_winners = rng.next_int(MIN_WINNERS, MAX_WINNERS)
    winners = sum(1 for entry in entries if entry.final_value >= target_value)

    if winners < min_winners:
        losers = sorted(
            (entry for entry in entries if entry.final_value < target_value),
            key=lambda entry: entry.final_value,
            reverse=True,
        )
        for entry in losers[: min_winners - winners]:
            boosted = target_value * (1.0 + rng.next() * WINNER_BOOST_SPREAD)
            entry.final_value = round_cents(boosted)
            entry.percentage_change_of_value = round_cents(
                (boosted - starting_cash) / starting_cash * 100
            )

    logger.info(
        "Generated %d bots for day %d: %d at or above target %.0f (minimum %d)",
        len(entries),
        challenge.day,
        sum(1 for entry in entries if entry.final_value >= target_value),
        target_value,
        min_winners,
    )
    return entries
