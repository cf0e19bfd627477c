"""The assembled daily challenge record."""

import datetime

from pydantic import BaseModel, ConfigDict, Field

from Tradle.models.enums import DataOrigin
from Tradle.models.game import DateRange, GameParameters, ParPerformance
from Tradle.models.market_data import CondensedPoint

# 60 seconds at 5 updates per second
CHALLENGE_POINTS: int = 300


class Challenge(BaseModel):
    """One calendar day's challenge.

    Frozen because a challenge is created once per day and then only read by
    game sessions; no write ever targets an existing challenge.
    """

    model_config = ConfigDict(frozen=True)

    day: int = Field(ge=1)
    challenge_date: datetime.date
    symbol: str
    company_name: str
    sector: str | None = None
    wiki_link: str | None = None
    info_link: str | None = None
    date_range: DateRange
    game_parameters: GameParameters
    par_performance: ParPerformance
    price_data: list[CondensedPoint] = Field(
        min_length=CHALLENGE_POINTS, max_length=CHALLENGE_POINTS
    )
    data_origin: DataOrigin = DataOrigin.HISTORICAL

    @property
    def trading_days_estimate(self) -> int:
        return self.date_range.trading_days_estimate

    @property
    def start_year(self) -> int:
        return self.date_range.start_date.year

    @property
    def end_year(self) -> int:
        return self.date_range.end_date.year
