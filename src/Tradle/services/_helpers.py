"""Row validation and the retry policy shared by the price sources.

Vendor history is gappy: halted days come back with NaN closes, some records
miss open/high/low, and now and then a record is not a record at all. A row
is kept only when its close is a positive, finite number; missing open, high
and low fall back to the close, and missing volume counts as zero.

Both sources send each request through :func:`fetch_with_retry`, so a
transient failure is retried the same way whichever vendor is configured.
"""

from __future__ import annotations

import asyncio
import datetime
import logging
import math
from collections.abc import Callable, Coroutine
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from Tradle.models.market_data import RawPricePoint
from Tradle.services.rate_limiter import RateLimiter
from Tradle.utils.exceptions import (
    DataFetchError,
    DataSourceUnavailableError,
    InsufficientDataError,
    RateLimitExceededError,
    TickerNotFoundError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------

YFINANCE_SOURCE: Final[str] = "yfinance"
TIINGO_SOURCE: Final[str] = "tiingo"
EXTERNAL_CALL_TIMEOUT_SECONDS: Final[float] = 30.0

# Fewer rows than this cannot make a meaningful 300-point game
MIN_PRICE_ROWS: Final[int] = 50


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------


class RetryPolicy(BaseModel):
    """How many times a price request is tried, and how long to wait between tries."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    backoff_delays: tuple[float, ...] = (1.0, 2.0, 4.0)

    def delay_before_retry(self, attempt: int, exc: Exception) -> float:
        """Seconds to wait after failed *attempt* (0-based).

        A server's ``Retry-After`` hint wins over the backoff schedule; past
        the end of the schedule the last delay is reused.
        """
        if (
            isinstance(exc, RateLimitExceededError)
            and exc.retry_after is not None
            and exc.retry_after > 0
        ):
            return exc.retry_after
        if not self.backoff_delays:
            return 0.0
        return self.backoff_delays[min(attempt, len(self.backoff_delays) - 1)]


DEFAULT_RETRY_POLICY: Final[RetryPolicy] = RetryPolicy()


async def fetch_with_retry[T](
    fetch_fn: Callable[[], Coroutine[Any, Any, T]],
    *,
    rate_limiter: RateLimiter,
    ticker: str,
    source: str,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> T:
    """Run one upstream request per attempt through the gate, retrying failures.

    ``TickerNotFoundError`` and ``InsufficientDataError`` are answers, not
    failures, and propagate at once. Other ``DataFetchError`` subclasses
    (HTTP errors, 429s, malformed payloads) are retried and re-raised
    unchanged once the budget is spent. Anything else is retried too, since
    yfinance raises a grab bag of exception types, and ends up wrapped in
    ``DataSourceUnavailableError``.

    Raises:
        TickerNotFoundError: Immediately.
        InsufficientDataError: Immediately.
        RateLimitExceededError: If the last attempt was rate limited.
        DataSourceUnavailableError: If the last attempt failed otherwise.
    """
    last_exc: Exception | None = None

    for attempt in range(policy.max_attempts):
        await rate_limiter.acquire()
        try:
            return await fetch_fn()
        except (TickerNotFoundError, InsufficientDataError):
            raise
        except Exception as exc:  # noqa: BLE001
            last_exc = exc
        finally:
            rate_limiter.release()

        logger.warning(
            "%s request for %s failed (attempt %d/%d): %s: %s",
            source,
            ticker,
            attempt + 1,
            policy.max_attempts,
            type(last_exc).__name__,
            last_exc,
        )
        if attempt < policy.max_attempts - 1:
            await asyncio.sleep(policy.delay_before_retry(attempt, last_exc))

    assert last_exc is not None  # noqa: S101
    if isinstance(last_exc, DataFetchError):
        raise last_exc
    raise DataSourceUnavailableError(
        f"{source} request for {ticker} failed after {policy.max_attempts} attempts: {last_exc}",
        ticker=ticker,
        source=source,
    ) from last_exc


# ---------------------------------------------------------------------------
# Row validation
# ---------------------------------------------------------------------------


def positive_float(value: object) -> float | None:
    """Return *value* as a finite float above zero, or None (NaN, None, junk, <= 0)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value))
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def build_price_row(
    row_date: datetime.date,
    *,
    open_price: object,
    high: object,
    low: object,
    close: object,
    volume: object,
) -> RawPricePoint | None:
    """Validate one vendor record; None when its close is unusable."""
    close_price = positive_float(close)
    if close_price is None:
        return None
    opened = positive_float(open_price) or close_price
    shares = positive_float(volume)
    return RawPricePoint(
        date=row_date,
        open=opened,
        high=positive_float(high) or max(opened, close_price),
        low=positive_float(low) or min(opened, close_price),
        close=close_price,
        volume=int(shares) if shares is not None else 0,
    )


def require_rows(
    rows: list[RawPricePoint],
    *,
    dropped: int,
    ticker: str,
    source: str,
) -> list[RawPricePoint]:
    """Sort usable rows by date and insist on ``MIN_PRICE_ROWS`` of them.

    Raises:
        InsufficientDataError: If too few rows survived validation.
    """
    if dropped:
        logger.warning("Dropped %d %s rows for %s without a usable close", dropped, source, ticker)
    if len(rows) < MIN_PRICE_ROWS:
        raise InsufficientDataError(
            f"Only {len(rows)} usable rows for {ticker} (minimum {MIN_PRICE_ROWS})",
            ticker=ticker,
            source=source,
        )
    return sorted(rows, key=lambda point: point.date)
