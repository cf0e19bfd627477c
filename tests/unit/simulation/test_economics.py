"""Tests for starting cash, target value, and target return."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from Tradle.models import CondensedPoint, GameParameters, ParPerformance
from Tradle.simulation._rounding import round_half_up
from Tradle.simulation.economics import (
    FALLBACK_GAME_PARAMETERS,
    calculate_game_parameters,
    evaluate_economics,
    finalize_parameters,
    provisional_parameters,
    starting_cash_for,
)

CondensedFactory = Callable[[list[float]], list[CondensedPoint]]


def _par(final_value: float, cash: float = 2000.0) -> ParPerformance:
    return ParPerformance(
        par_average_buy_price=100.0,
        par_total_shares_bought=10,
        par_final_value=final_value,
        par_cash_remaining=final_value,
        efficiency=0.5,
        starting_cash=cash,
    )


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (-0.5, 0), (20.5, 21)],
    )
    def test_half_rounds_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected


class TestStartingCash:
    @pytest.mark.parametrize(
        ("price", "cash"),
        [(50.0, 1000.0), (100.0, 2000.0), (102.5, 2100.0), (12.5, 300.0), (2.0, 0.0)],
    )
    def test_rounded_to_hundreds(self, price: float, cash: float) -> None:
        assert starting_cash_for(price) == cash


class TestTwoPassPipeline:
    """provisional -> par -> finalize."""

    def test_provisional_leaves_target_unset(self, make_condensed: CondensedFactory) -> None:
        params = provisional_parameters(make_condensed([50.0, 51.0]))
        assert params.starting_cash == 1000.0
        assert params.initial_stock_price == 50.0
        assert params.target_value == 0.0
        assert params.target_return_percentage == 0.0
        assert params.starting_shares == 0

    def test_finalize_sets_target_above_par(self) -> None:
        provisional = GameParameters(
            starting_cash=2000.0,
            target_value=0.0,
            initial_stock_price=100.0,
            target_return_percentage=0.0,
        )
        params = finalize_parameters(provisional, _par(2200.0))
        assert params.target_value == 2600.0
        assert params.target_return_percentage == 30.0
        assert params.starting_cash == 2000.0

    def test_finalize_zero_cash_gives_zero_return(self) -> None:
        provisional = GameParameters(
            starting_cash=0.0,
            target_value=0.0,
            initial_stock_price=2.0,
            target_return_percentage=0.0,
        )
        params = finalize_parameters(provisional, _par(0.0, cash=0.0))
        assert params.target_return_percentage == 0.0
        assert params.target_value == 0.0


class TestCalculateGameParameters:
    def test_flat_series(self, make_condensed: CondensedFactory) -> None:
        """Flat 100: par keeps 2000, target 2400, 20% return."""
        params = calculate_game_parameters(make_condensed([100.0] * 300))
        assert params.starting_cash == 2000.0
        assert params.target_value == 2400.0
        assert params.target_return_percentage == 20.0
        assert params.initial_stock_price == 100.0

    def test_first_price_50(self, make_condensed: CondensedFactory) -> None:
        params = calculate_game_parameters(make_condensed([50.0] * 300))
        assert params.starting_cash == 1000.0
        assert params.target_value == 1200.0

    def test_empty_series_uses_fallback(self) -> None:
        assert calculate_game_parameters([]) == FALLBACK_GAME_PARAMETERS
        assert FALLBACK_GAME_PARAMETERS.starting_cash == 5000.0
        assert FALLBACK_GAME_PARAMETERS.target_value == 6000.0

    def test_target_is_multiple_of_hundred(
        self,
        make_condensed: CondensedFactory,
        linear_closes: Callable[[float, float, int], list[float]],
    ) -> None:
        params = calculate_game_parameters(make_condensed(linear_closes(80.0, 140.0, 300)))
        assert params.target_value % 100 == 0
        assert params.starting_cash % 100 == 0
        assert params.target_value > params.starting_cash


class TestEvaluateEconomics:
    def test_par_runs_against_final_cash(
        self,
        make_condensed: CondensedFactory,
        linear_closes: Callable[[float, float, int], list[float]],
    ) -> None:
        params, par = evaluate_economics(make_condensed(linear_closes(100.0, 130.0, 300)))
        assert par.starting_cash == params.starting_cash
        assert par.par_final_value > params.starting_cash
        assert params.target_return_percentage >= 20.0

    def test_flat_series(self, make_condensed: CondensedFactory) -> None:
        params, par = evaluate_economics(make_condensed([100.0] * 300))
        assert params.target_value == 2400.0
        assert par.par_final_value == 2000.0
        assert par.par_total_shares_bought == 0
