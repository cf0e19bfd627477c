"""Append-only store for daily challenges.

All queries use parameterized SQL. Nested models (game parameters, par
performance, the 300-point price series) are stored as JSON text columns.
"""

import datetime
import json
import logging
import sqlite3

from Tradle.data.database import Database
from Tradle.models.challenge import Challenge
from Tradle.models.enums import DataOrigin
from Tradle.models.game import DateRange, GameParameters, ParPerformance
from Tradle.models.market_data import CondensedPoint
from Tradle.utils.exceptions import ChallengeExistsError

logger = logging.getLogger(__name__)

_CHALLENGE_COLUMNS = (
    "day, challenge_date, symbol, company_name, sector, wiki_link, info_link, "
    "start_date, end_date, trading_days_estimate, game_parameters, par_performance, "
    "price_data, data_origin"
)


class ChallengeRepository:
    """Query interface for the ``daily_challenges`` table.

    Rows are never updated or deleted: a date gets its challenge once.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def get_by_date(self, challenge_date: datetime.date) -> Challenge | None:
        """Return the challenge for a calendar date, or None."""
        conn = self._db.connection
        cursor = await conn.execute(
            f"SELECT {_CHALLENGE_COLUMNS} FROM daily_challenges "  # noqa: S608
            "WHERE challenge_date = ?",
            (challenge_date.isoformat(),),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return _row_to_challenge(row)

    async def get_by_day(self, day: int) -> Challenge | None:
        """Return the challenge with game number *day*, or None."""
        conn = self._db.connection
        cursor = await conn.execute(
            f"SELECT {_CHALLENGE_COLUMNS} FROM daily_challenges WHERE day = ?",  # noqa: S608
            (day,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return _row_to_challenge(row)

    async def get_latest_day(self) -> int:
        """Highest stored day number, 0 when the store is empty."""
        conn = self._db.connection
        cursor = await conn.execute("SELECT MAX(day) FROM daily_challenges")
        row = await cursor.fetchone()
        if row is None or row[0] is None:
            return 0
        return int(row[0])

    async def list_recent(self, *, limit: int = 10) -> list[Challenge]:
        """Most recent challenges first."""
        conn = self._db.connection
        cursor = await conn.execute(
            f"SELECT {_CHALLENGE_COLUMNS} FROM daily_challenges "  # noqa: S608
            "ORDER BY day DESC LIMIT ?",
            (limit,),
        )
        rows = await cursor.fetchall()
        return [_row_to_challenge(row) for row in rows]

    async def insert(self, challenge: Challenge) -> None:
        """Append a challenge.

        Raises:
            ChallengeExistsError: If the day or the date is already stored.
        """
        conn = self._db.connection
        try:
            await conn.execute(
                f"INSERT INTO daily_challenges ({_CHALLENGE_COLUMNS}, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    challenge.day,
                    challenge.challenge_date.isoformat(),
                    challenge.symbol,
                    challenge.company_name,
                    challenge.sector,
                    challenge.wiki_link,
                    challenge.info_link,
                    challenge.date_range.start_date.isoformat(),
                    challenge.date_range.end_date.isoformat(),
                    challenge.date_range.trading_days_estimate,
                    challenge.game_parameters.model_dump_json(),
                    challenge.par_performance.model_dump_json(
                        exclude={"par_profit_per_trade"}
                    ),
                    json.dumps([point.model_dump(mode="json") for point in challenge.price_data]),
                    challenge.data_origin.value,
                    datetime.datetime.now(datetime.UTC).isoformat(),
                ),
            )
        except sqlite3.IntegrityError as exc:
            await conn.rollback()
            msg = (
                f"Challenge for day {challenge.day} "
                f"({challenge.challenge_date.isoformat()}) already exists"
            )
            raise ChallengeExistsError(msg) from exc
        await conn.commit()
        logger.info(
            "Stored challenge day %d (%s): %s",
            challenge.day,
            challenge.challenge_date.isoformat(),
            challenge.symbol,
        )


def _row_to_challenge(row: sqlite3.Row) -> Challenge:
    """Convert a ``daily_challenges`` row tuple to a Challenge model."""
    return Challenge(
        day=row[0],
        challenge_date=datetime.date.fromisoformat(row[1]),
        symbol=row[2],
        company_name=row[3],
        sector=row[4],
        wiki_link=row[5],
        info_link=row[6],
        date_range=DateRange(
            start_date=datetime.date.fromisoformat(row[7]),
            end_date=datetime.date.fromisoformat(row[8]),
            trading_days_estimate=row[9],
        ),
        game_parameters=GameParameters.model_validate_json(row[10]),
        par_performance=ParPerformance.model_validate_json(row[11]),
        price_data=[CondensedPoint.model_validate(item) for item in json.loads(row[12])],
        data_origin=DataOrigin(row[13]),
    )
