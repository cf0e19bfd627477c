"""Pydantic v2 models and enums for the challenge engine.

Re-exports all public models so consumers can import directly:
    from Tradle.models import Challenge, CondensedPoint, GameParameters
"""

from Tradle.models.bots import BotEntry
from Tradle.models.challenge import CHALLENGE_POINTS, Challenge
from Tradle.models.enums import BotStrategy, DataOrigin, RejectionReason, Verdict
from Tradle.models.game import (
    DateRange,
    GameParameters,
    ParPerformance,
    PlayerStats,
    ScoreCard,
)
from Tradle.models.market_data import CondensedPoint, RawPricePoint, SymbolInfo

__all__ = [
    # Enums
    "BotStrategy",
    "DataOrigin",
    "RejectionReason",
    "Verdict",
    # Market data
    "CondensedPoint",
    "RawPricePoint",
    "SymbolInfo",
    # Game
    "DateRange",
    "GameParameters",
    "ParPerformance",
    "PlayerStats",
    "ScoreCard",
    # Challenge
    "CHALLENGE_POINTS",
    "Challenge",
    # Bots
    "BotEntry",
]
