"""Shared test fixtures for the Tradle test suite.

Provides deterministic price series and a fully assembled challenge so tests
don't need to inline large construction blocks.
"""

import datetime
from collections.abc import Callable

import pytest

from Tradle.models import (
    Challenge,
    CondensedPoint,
    DateRange,
    GameParameters,
    ParPerformance,
    RawPricePoint,
    SymbolInfo,
)
from Tradle.simulation.condense import condense
from Tradle.simulation.date_ranges import estimate_trading_days
from Tradle.simulation.economics import evaluate_economics


def _make_raw_series(
    closes: list[float],
    start: datetime.date = datetime.date(2015, 3, 2),
    volume: int = 1_000_000,
) -> list[RawPricePoint]:
    """Daily rows on consecutive calendar days with open=high=low=close."""
    return [
        RawPricePoint(
            date=start + datetime.timedelta(days=i),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


def _make_condensed(prices: list[float]) -> list[CondensedPoint]:
    """Condensed points with timestamps 0..len-1 and a flat volume."""
    return [
        CondensedPoint(timestamp=i, price=price, volume=1_000_000)
        for i, price in enumerate(prices)
    ]


def _linear_closes(start: float, end: float, length: int) -> list[float]:
    return [start + (end - start) * i / (length - 1) for i in range(length)]


@pytest.fixture()
def make_raw_series() -> Callable[..., list[RawPricePoint]]:
    """Factory: ``make_raw_series([100.0, 101.0, ...])``."""
    return _make_raw_series


@pytest.fixture()
def make_condensed() -> Callable[[list[float]], list[CondensedPoint]]:
    """Factory: ``make_condensed([100.0, 101.0, ...])``."""
    return _make_condensed


@pytest.fixture()
def linear_closes() -> Callable[[float, float, int], list[float]]:
    """Factory: ``linear_closes(start, end, length)``."""
    return _linear_closes


@pytest.fixture()
def rising_raw_series() -> list[RawPricePoint]:
    """504 daily closes rising linearly from 100 to 150 (two years of data)."""
    return _make_raw_series(_linear_closes(100.0, 150.0, 504))


@pytest.fixture()
def sample_symbol() -> SymbolInfo:
    return SymbolInfo(
        ticker="AAPL",
        name="Apple Inc.",
        sector="Technology",
        wiki_link="https://en.wikipedia.org/wiki/Apple_Inc",
        info_link="https://www.google.com/search?q=Apple+Inc.+stock",
    )


@pytest.fixture()
def sample_game_parameters() -> GameParameters:
    """Flat 100-dollar game: 2000 cash, 2400 target."""
    return GameParameters(
        starting_cash=2000.0,
        starting_shares=0,
        target_value=2400.0,
        initial_stock_price=100.0,
        target_return_percentage=20.0,
    )


@pytest.fixture()
def sample_par_performance() -> ParPerformance:
    """Par that bought 20 shares at 100 and finished at 2200."""
    return ParPerformance(
        par_average_buy_price=100.0,
        par_total_shares_bought=20,
        par_final_value=2200.0,
        par_cash_remaining=2200.0,
        efficiency=0.6,
        starting_cash=2000.0,
    )


@pytest.fixture()
def sample_challenge(
    rising_raw_series: list[RawPricePoint],
    sample_symbol: SymbolInfo,
) -> Challenge:
    """Day 1 challenge built from the rising series through the real pipeline."""
    condensed = condense(rising_raw_series)
    params, par = evaluate_economics(condensed)
    start = datetime.date(2015, 3, 2)
    end = datetime.date(2017, 3, 2)
    return Challenge(
        day=1,
        challenge_date=datetime.date(2024, 3, 15),
        symbol=sample_symbol.ticker,
        company_name=sample_symbol.name,
        sector=sample_symbol.sector,
        wiki_link=sample_symbol.wiki_link,
        info_link=sample_symbol.info_link,
        date_range=DateRange(
            start_date=start,
            end_date=end,
            trading_days_estimate=estimate_trading_days(start, end),
        ),
        game_parameters=params,
        par_performance=par,
        price_data=condensed,
    )
