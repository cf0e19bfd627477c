"""Leaderboard bot models."""

from pydantic import BaseModel

from Tradle.models.enums import BotStrategy


class BotEntry(BaseModel):
    """A simulated leaderboard entry seeded from the challenge day.

    Not frozen: the winner-boost pass rewrites the value fields of the
    closest losers after the whole field has been simulated.
    """

    day: int
    name: str
    strategy: BotStrategy
    final_value: float
    percentage_change_of_value: float
    avg_buy: float
    ppt: float
    num_tries: int
