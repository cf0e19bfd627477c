"""Daily challenge assembly: the retry loop over stock and date-range candidates.

For a calendar date the assembler walks a bounded sequence of candidates::

    select stock -> generate date range -> fetch -> condense
        -> economics (provisional -> par -> finalize) -> validate

and stores the first candidate whose economics make a winnable but
non-trivial game. Everything except the price fetch is pure and seeded
from the date, so two runs for the same date with the same data pick the
same challenge.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterator, Sequence
from typing import Final, NamedTuple

from Tradle.data.repository import ChallengeRepository
from Tradle.models.challenge import Challenge
from Tradle.models.enums import RejectionReason
from Tradle.models.game import GameParameters
from Tradle.models.market_data import SymbolInfo
from Tradle.services.catalog import SymbolCatalog
from Tradle.services.price_data import FallbackPriceService
from Tradle.simulation.condense import condense
from Tradle.simulation.date_ranges import generate_date_range
from Tradle.simulation.economics import evaluate_economics
from Tradle.simulation.seeded import daily_seed
from Tradle.simulation.symbols import select_symbol
from Tradle.simulation.tradability import analyze_tradability
from Tradle.utils.exceptions import ChallengeGenerationError, DataFetchError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MAX_STOCK_ATTEMPTS: Final[int] = 10
DEFAULT_RANGES_PER_STOCK: Final[int] = 5
DEFAULT_MAX_TOTAL_ATTEMPTS: Final[int] = 50

# Stock seeds for successive attempts are this far apart
STOCK_SEED_STRIDE: Final[int] = 1000

# Accepted challenges need at least this target return (percent)
MIN_TARGET_RETURN_PERCENTAGE: Final[float] = 5.0


class Candidate(NamedTuple):
    """One stock/date-range combination to try."""

    stock_seed: int
    date_range_seed: int
    stock_attempt: int
    range_attempt: int


def iter_candidates(
    seed: int,
    max_stock_attempts: int = DEFAULT_MAX_STOCK_ATTEMPTS,
    ranges_per_stock: int = DEFAULT_RANGES_PER_STOCK,
    max_total_attempts: int = DEFAULT_MAX_TOTAL_ATTEMPTS,
) -> Iterator[Candidate]:
    """Yield candidates stock-major, stopping after *max_total_attempts*."""
    yielded = 0
    for stock_attempt in range(max_stock_attempts):
        stock_seed = seed + stock_attempt * STOCK_SEED_STRIDE
        for range_attempt in range(ranges_per_stock):
            if yielded >= max_total_attempts:
                return
            yield Candidate(
                stock_seed=stock_seed,
                date_range_seed=stock_seed + range_attempt,
                stock_attempt=stock_attempt,
                range_attempt=range_attempt,
            )
            yielded += 1


def validate_economics(params: GameParameters) -> RejectionReason | None:
    """Return why *params* make an unacceptable game, or None if they are fine."""
    if params.target_value <= params.starting_cash:
        return RejectionReason.TARGET_NOT_ABOVE_CASH
    if params.target_return_percentage < MIN_TARGET_RETURN_PERCENTAGE:
        return RejectionReason.RETURN_BELOW_MINIMUM
    return None


class ChallengeAssembler:
    """Build and store the challenge for a calendar date.

    Usage::

        async with Database("data/tradle.db") as db:
            cache = ServiceCache(database=db)
            prices = FallbackPriceService(YFinancePriceSource(RateLimiter()), cache)
            assembler = ChallengeAssembler(SymbolCatalog(), prices, ChallengeRepository(db))
            challenge = await assembler.assemble(datetime.date.today())
    """

    def __init__(
        self,
        catalog: SymbolCatalog,
        prices: FallbackPriceService,
        repository: ChallengeRepository,
        *,
        max_stock_attempts: int = DEFAULT_MAX_STOCK_ATTEMPTS,
        ranges_per_stock: int = DEFAULT_RANGES_PER_STOCK,
        max_total_attempts: int = DEFAULT_MAX_TOTAL_ATTEMPTS,
    ) -> None:
        self._catalog = catalog
        self._prices = prices
        self._repository = repository
        self._max_stock_attempts = max_stock_attempts
        self._ranges_per_stock = ranges_per_stock
        self._max_total_attempts = max_total_attempts

    async def assemble(self, challenge_date: datetime.date) -> Challenge:
        """Return the challenge for *challenge_date*, generating it if needed.

        An already-stored challenge for the date is returned unchanged.

        Raises:
            ChallengeGenerationError: If no candidate passed validation.
        """
        existing = await self._repository.get_by_date(challenge_date)
        if existing is not None:
            logger.info(
                "Challenge for %s already exists (day %d)",
                challenge_date.isoformat(),
                existing.day,
            )
            return existing

        symbols = self._catalog.list_symbols()
        seed = daily_seed(challenge_date)
        attempts = 0

        for candidate in iter_candidates(
            seed,
            self._max_stock_attempts,
            self._ranges_per_stock,
            self._max_total_attempts,
        ):
            attempts += 1
            challenge = await self._try_candidate(candidate, challenge_date, symbols)
            if challenge is None:
                continue

            await self._repository.insert(challenge)
            logger.info(
                "Accepted %s %s..%s for %s as day %d after %d attempt(s)",
                challenge.symbol,
                challenge.date_range.start_date.isoformat(),
                challenge.date_range.end_date.isoformat(),
                challenge_date.isoformat(),
                challenge.day,
                attempts,
            )
            return challenge

        msg = (
            f"No viable challenge for {challenge_date.isoformat()} "
            f"after {attempts} attempts"
        )
        logger.error(msg)
        raise ChallengeGenerationError(msg, attempts=attempts)

    async def _try_candidate(
        self,
        candidate: Candidate,
        challenge_date: datetime.date,
        symbols: Sequence[SymbolInfo],
    ) -> Challenge | None:
        """Run one candidate through the pipeline; None means rejected."""
        symbol = select_symbol(symbols, candidate.stock_seed)

        date_range = generate_date_range(candidate.date_range_seed)
        if not date_range.is_valid:
            _log_rejection(candidate, symbol.ticker, RejectionReason.INVALID_DATE_RANGE)
            return None

        try:
            series = await self._prices.fetch_prices(
                symbol.ticker, date_range.start_date, date_range.end_date
            )
        except DataFetchError as exc:
            _log_rejection(candidate, symbol.ticker, RejectionReason.DATA_FAILURE, str(exc))
            return None

        condensed = condense(series.rows)
        params, par = evaluate_economics(condensed)

        reason = validate_economics(params)
        if reason is not None:
            _log_rejection(
                candidate,
                symbol.ticker,
                reason,
                f"cash={params.starting_cash:.0f} target={params.target_value:.0f} "
                f"return={params.target_return_percentage:.0f}%",
            )
            return None

        logger.debug(
            "Candidate %s tradability %.2f", symbol.ticker, analyze_tradability(condensed)
        )

        latest_day = await self._repository.get_latest_day()
        return Challenge(
            day=latest_day + 1,
            challenge_date=challenge_date,
            symbol=symbol.ticker,
            company_name=symbol.name,
            sector=symbol.sector,
            wiki_link=symbol.wiki_link,
            info_link=symbol.info_link,
            date_range=date_range,
            game_parameters=params,
            par_performance=par,
            price_data=condensed,
            data_origin=series.origin,
        )


def _log_rejection(
    candidate: Candidate,
    ticker: str,
    reason: RejectionReason,
    detail: str = "",
) -> None:
    logger.info(
        "Rejected %s (stock attempt %d, range attempt %d): %s %s",
        ticker,
        candidate.stock_attempt,
        candidate.range_attempt,
        reason.value,
        detail,
    )
