"""Pure, deterministic challenge-generation logic.

No I/O and no hidden randomness: every draw comes from an explicit
``SeededRandom`` passed in by the caller.
"""

from Tradle.simulation.bots import generate_bot_entries
from Tradle.simulation.condense import condense
from Tradle.simulation.date_ranges import (
    FALLBACK_DATE_RANGE,
    generate_date_range,
    resolve_date_range,
)
from Tradle.simulation.economics import calculate_game_parameters, evaluate_economics
from Tradle.simulation.par import simulate_par
from Tradle.simulation.scoring import compare_to_par, share_text
from Tradle.simulation.seeded import SeededRandom, daily_seed, seeded_random_from_seed
from Tradle.simulation.symbols import select_symbol
from Tradle.simulation.tradability import analyze_tradability

__all__ = [
    "FALLBACK_DATE_RANGE",
    "SeededRandom",
    "analyze_tradability",
    "calculate_game_parameters",
    "compare_to_par",
    "condense",
    "daily_seed",
    "evaluate_economics",
    "generate_bot_entries",
    "generate_date_range",
    "resolve_date_range",
    "seeded_random_from_seed",
    "select_symbol",
    "share_text",
    "simulate_par",
]
