"""Tests for player-vs-par grading and the share text."""

from __future__ import annotations

import math

import pytest

from Tradle.models import GameParameters, ParPerformance, PlayerStats, Verdict
from Tradle.simulation.scoring import compare_to_par, share_text


def _player(final_value: float, avg_buy: float, shares: int) -> PlayerStats:
    return PlayerStats(
        final_value=final_value, average_buy_price=avg_buy, total_shares_bought=shares
    )


class TestCompareToPar:
    """Par fixture: avg buy 100, 20 shares, final 2200 -> par PPT 10."""

    def test_beats_par_on_every_axis(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(2500.0, 95.0, 10)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        assert card.buy_price is Verdict.BETTER
        assert card.profit_per_trade is Verdict.BETTER
        assert card.target_met is True
        assert card.player_profit_per_trade == 50.0
        assert card.return_percentage == pytest.approx(25.0)

    def test_worse_than_par(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(2100.0, 105.0, 50)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        assert card.buy_price is Verdict.WORSE
        assert card.profit_per_trade is Verdict.WORSE
        assert card.target_met is False
        assert card.player_profit_per_trade == 2.0

    def test_ties_count_as_better(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        """Equal avg buy and equal PPT are both better; exact target is met."""
        player = _player(2400.0, 100.0, 40)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        assert card.buy_price is Verdict.BETTER
        assert card.profit_per_trade is Verdict.BETTER
        assert card.target_met is True

    def test_no_trades(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(2000.0, 0.0, 0)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        assert card.buy_price is Verdict.NO_TRADES
        assert card.profit_per_trade is Verdict.NO_TRADES
        assert card.player_profit_per_trade == 0.0
        assert card.return_percentage == 0.0
        assert card.target_met is False

    def test_par_without_trades_is_beaten_on_ppt(
        self,
        sample_game_parameters: GameParameters,
    ) -> None:
        idle_par = ParPerformance(
            par_average_buy_price=100.0,
            par_total_shares_bought=0,
            par_final_value=2000.0,
            par_cash_remaining=2000.0,
            efficiency=0.5,
            starting_cash=2000.0,
        )
        assert math.isnan(idle_par.par_profit_per_trade)
        card = compare_to_par(_player(1900.0, 110.0, 5), sample_game_parameters, idle_par)
        assert card.profit_per_trade is Verdict.BETTER
        assert card.buy_price is Verdict.WORSE

    def test_zero_cash_return(self, sample_par_performance: ParPerformance) -> None:
        params = GameParameters(
            starting_cash=0.0,
            target_value=0.0,
            initial_stock_price=1.0,
            target_return_percentage=0.0,
        )
        card = compare_to_par(_player(10.0, 1.0, 1), params, sample_par_performance)
        assert card.return_percentage == 0.0


class TestShareText:
    def test_winning_block(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(2500.0, 95.0, 10)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        lines = share_text(card, player, 7).splitlines()
        assert lines[0] == "Tradle #7 \U0001f7e9\U0001f7e9✅"
        assert lines[1] == "Final Value: $2,500.00 (+25.0%)"
        assert lines[2] == "PPT: $50.00"

    def test_losing_block(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(1800.0, 105.0, 10)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        text = share_text(card, player, 12)
        assert text.startswith("Tradle #12 \U0001f7e5\U0001f7e5❌")
        assert "(-10.0%)" in text

    def test_no_trades_omits_ppt(
        self,
        sample_game_parameters: GameParameters,
        sample_par_performance: ParPerformance,
    ) -> None:
        player = _player(2000.0, 0.0, 0)
        card = compare_to_par(player, sample_game_parameters, sample_par_performance)
        text = share_text(card, player, 1)
        assert "⬛⬛" in text
        assert "PPT" not in text
        assert len(text.splitlines()) == 2
