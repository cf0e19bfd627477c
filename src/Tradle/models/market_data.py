"""Market data models: raw daily price rows and the condensed playback points.

Prices are floats: the game rules are defined in binary floating point and
rounded to cents only where a rule says so.
"""

import datetime

from pydantic import BaseModel, ConfigDict, Field


class RawPricePoint(BaseModel):
    """A single daily OHLCV row from the data vendor or the fallback walk.

    Frozen because historical price data should never be mutated after creation.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    open: float = Field(ge=0)
    high: float = Field(ge=0)
    low: float = Field(ge=0)
    close: float = Field(ge=0)
    volume: int = Field(ge=0)


class CondensedPoint(BaseModel):
    """One tick of the 300-point playback buffer (60 seconds at 5 updates/s)."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0)
    price: float = Field(gt=0)
    volume: int | None = Field(default=None, ge=0)


class SymbolInfo(BaseModel):
    """A catalog entry for a tradable stock."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    name: str
    sector: str | None = None
    wiki_link: str | None = None
    info_link: str | None = None
