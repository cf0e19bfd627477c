"""Historical daily price sources and the fallback-aware fetch service.

Two vendor sources implement :class:`PriceDataSource`:

- :class:`YFinancePriceSource` wraps the synchronous yfinance client in
  ``asyncio.to_thread()``.
- :class:`TiingoPriceSource` calls the Tiingo daily-prices REST endpoint
  with ``httpx``.

Both raise typed :class:`~Tradle.utils.exceptions.DataFetchError`
subclasses. :class:`FallbackPriceService` sits in front of either one,
adds the cache-first pattern, and turns any fetch failure into a seeded
synthetic series so challenge generation always has rows to work with.
"""

from __future__ import annotations

import asyncio
import datetime
import json
import logging
from typing import Any, Final, NamedTuple, Protocol

import httpx
import pandas as pd
import yfinance as yf  # type: ignore[import-untyped]

from Tradle.models.enums import DataOrigin
from Tradle.models.market_data import RawPricePoint
from Tradle.services._helpers import (
    DEFAULT_RETRY_POLICY,
    EXTERNAL_CALL_TIMEOUT_SECONDS,
    MIN_PRICE_ROWS,
    TIINGO_SOURCE,
    YFINANCE_SOURCE,
    RetryPolicy,
    build_price_row,
    fetch_with_retry,
    positive_float,
    require_rows,
)
from Tradle.services.cache import DATA_TYPE_PRICES, ServiceCache
from Tradle.services.rate_limiter import RateLimiter
from Tradle.services.synthetic import generate_fallback_series
from Tradle.utils.exceptions import (
    DataFetchError,
    DataSourceUnavailableError,
    InsufficientDataError,
    RateLimitExceededError,
    TickerNotFoundError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TIINGO_BASE_URL: Final[str] = "https://api.tiingo.com/tiingo/daily"

# yfinance returns title-cased columns
PRICE_COLUMNS: Final[tuple[str, ...]] = ("Open", "High", "Low", "Close", "Volume")


class PriceDataSource(Protocol):
    """Anything that can return daily OHLCV rows for a ticker and window."""

    @property
    def name(self) -> str: ...

    async def fetch(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[RawPricePoint]: ...


class PriceSeries(NamedTuple):
    """Rows for one fetch plus where they came from."""

    rows: list[RawPricePoint]
    origin: DataOrigin


# ---------------------------------------------------------------------------
# yfinance
# ---------------------------------------------------------------------------


class YFinancePriceSource:
    """Daily history from yfinance.

    Usage::

        source = YFinancePriceSource(rate_limiter=RateLimiter())
        rows = await source.fetch("AAPL", date(2015, 3, 2), date(2018, 3, 2))
    """

    name = YFINANCE_SOURCE

    def __init__(
        self,
        rate_limiter: RateLimiter,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._retry_policy = retry_policy

    async def fetch(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[RawPricePoint]:
        """Fetch daily rows for ``[start_date, end_date]``.

        Rows without a usable close (NaN, zero, missing) are dropped before
        the minimum-row check.

        Raises:
            TickerNotFoundError: If yfinance returns no rows.
            InsufficientDataError: If fewer than 50 usable rows come back.
            DataSourceUnavailableError: If yfinance fails after retries.
        """
        ticker = ticker.upper().strip()
        raw_df = await fetch_with_retry(
            lambda: self._fetch_raw_history(ticker, start_date, end_date),
            rate_limiter=self._rate_limiter,
            ticker=ticker,
            source=YFINANCE_SOURCE,
            policy=self._retry_policy,
        )
        _validate_history_dataframe(raw_df, ticker)
        return _dataframe_to_rows(raw_df, ticker)

    async def _fetch_raw_history(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> pd.DataFrame:
        """Run ``Ticker.history`` in a worker thread with a timeout.

        yfinance treats ``end`` as exclusive, so one day is added.
        """

        def _sync_fetch() -> pd.DataFrame:
            t = yf.Ticker(ticker)
            df: pd.DataFrame = t.history(
                start=start_date.isoformat(),
                end=(end_date + datetime.timedelta(days=1)).isoformat(),
                auto_adjust=False,
            )
            return df

        return await asyncio.wait_for(
            asyncio.to_thread(_sync_fetch),
            timeout=EXTERNAL_CALL_TIMEOUT_SECONDS,
        )


def _validate_history_dataframe(df: pd.DataFrame | None, ticker: str) -> None:
    if df is None or df.empty:
        raise TickerNotFoundError(
            f"No price history returned for ticker '{ticker}'",
            ticker=ticker,
            source=YFINANCE_SOURCE,
        )

    missing = set(PRICE_COLUMNS) - set(df.columns)
    if missing:
        raise DataSourceUnavailableError(
            f"Missing columns in price history for {ticker}: {sorted(missing)}",
            ticker=ticker,
            source=YFINANCE_SOURCE,
        )

    if len(df) < MIN_PRICE_ROWS:
        raise InsufficientDataError(
            f"Only {len(df)} rows returned for {ticker} (minimum {MIN_PRICE_ROWS})",
            ticker=ticker,
            source=YFINANCE_SOURCE,
        )


def _dataframe_to_rows(df: pd.DataFrame, ticker: str) -> list[RawPricePoint]:
    """Convert a yfinance history frame (tz-aware DatetimeIndex) to usable rows."""
    rows: list[RawPricePoint] = []
    dropped = 0
    for idx, row in df.iterrows():
        row_date: datetime.date = (
            idx.date() if isinstance(idx, pd.Timestamp) else pd.Timestamp(str(idx)).date()
        )
        point = build_price_row(
            row_date,
            open_price=row["Open"],
            high=row["High"],
            low=row["Low"],
            close=row["Close"],
            volume=row["Volume"],
        )
        if point is None:
            dropped += 1
        else:
            rows.append(point)
    return require_rows(rows, dropped=dropped, ticker=ticker, source=YFINANCE_SOURCE)


# ---------------------------------------------------------------------------
# Tiingo
# ---------------------------------------------------------------------------


class TiingoPriceSource:
    """Daily history from the Tiingo REST API.

    Usage::

        source = TiingoPriceSource(api_token="...", rate_limiter=RateLimiter())
        try:
            rows = await source.fetch("AAPL", date(2015, 3, 2), date(2018, 3, 2))
        finally:
            await source.aclose()
    """

    name = TIINGO_SOURCE

    def __init__(
        self,
        api_token: str,
        rate_limiter: RateLimiter,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ) -> None:
        self._api_token = api_token
        self._rate_limiter = rate_limiter
        self._retry_policy = retry_policy
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=30.0, write=10.0, pool=5.0),
            limits=httpx.Limits(max_connections=5, max_keepalive_connections=2),
        )

        logger.info("TiingoPriceSource initialized")

    async def aclose(self) -> None:
        """Close the shared httpx client."""
        await self._client.aclose()

    async def fetch(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[RawPricePoint]:
        """Fetch daily rows; 429s, 5xx and network errors are retried.

        Raises:
            TickerNotFoundError: On HTTP 404 or an empty array.
            InsufficientDataError: If fewer than 50 usable rows come back.
            RateLimitExceededError: If 429s persist past the retry budget.
            DataSourceUnavailableError: On other HTTP, network or payload failures.
        """
        ticker = ticker.upper().strip()
        return await fetch_with_retry(
            lambda: self._fetch_once(ticker, start_date, end_date),
            rate_limiter=self._rate_limiter,
            ticker=ticker,
            source=TIINGO_SOURCE,
            policy=self._retry_policy,
        )

    async def _fetch_once(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> list[RawPricePoint]:
        params: dict[str, str] = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "token": self._api_token,
        }
        url = f"{TIINGO_BASE_URL}/{ticker}/prices"

        try:
            response = await asyncio.wait_for(
                self._client.get(url, params=params),
                timeout=EXTERNAL_CALL_TIMEOUT_SECONDS,
            )
        except TimeoutError as exc:
            raise DataSourceUnavailableError(
                f"Tiingo request for {ticker} timed out",
                ticker=ticker,
                source=TIINGO_SOURCE,
            ) from exc
        except httpx.HTTPError as exc:
            raise DataSourceUnavailableError(
                f"Tiingo request for {ticker} failed: {exc}",
                ticker=ticker,
                source=TIINGO_SOURCE,
            ) from exc

        if response.status_code == 429:  # noqa: PLR2004
            raise RateLimitExceededError(
                f"Tiingo rate limit hit for {ticker}",
                ticker=ticker,
                source=TIINGO_SOURCE,
                retry_after=positive_float(response.headers.get("Retry-After")),
            )
        if response.status_code == 404:  # noqa: PLR2004
            raise TickerNotFoundError(
                f"Tiingo does not know ticker '{ticker}'",
                ticker=ticker,
                source=TIINGO_SOURCE,
                http_status=404,
            )
        if response.status_code != 200:  # noqa: PLR2004
            raise DataSourceUnavailableError(
                f"Tiingo returned HTTP {response.status_code} for {ticker}",
                ticker=ticker,
                source=TIINGO_SOURCE,
                http_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise DataSourceUnavailableError(
                f"Tiingo returned malformed JSON for {ticker}",
                ticker=ticker,
                source=TIINGO_SOURCE,
            ) from exc

        if not isinstance(payload, list) or not payload:
            raise TickerNotFoundError(
                f"Tiingo returned no prices for '{ticker}'",
                ticker=ticker,
                source=TIINGO_SOURCE,
            )

        return _payload_to_rows(payload, ticker)


def _payload_to_rows(payload: list[Any], ticker: str) -> list[RawPricePoint]:
    """Convert Tiingo price records to usable rows.

    A record that is not an object or has no parseable date means the
    response is not what the API documents, so the whole response is
    rejected; a record whose close is unusable is only dropped.
    """
    rows: list[RawPricePoint] = []
    dropped = 0
    for item in payload:
        try:
            # "2015-03-02T00:00:00.000Z" -> 2015-03-02
            row_date = datetime.date.fromisoformat(str(item["date"])[:10])
            fields = {key: item.get(key) for key in ("open", "high", "low", "close", "volume")}
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise DataSourceUnavailableError(
                f"Tiingo returned a malformed price record for {ticker}: {exc!r}",
                ticker=ticker,
                source=TIINGO_SOURCE,
            ) from exc
        point = build_price_row(
            row_date,
            open_price=fields["open"],
            high=fields["high"],
            low=fields["low"],
            close=fields["close"],
            volume=fields["volume"],
        )
        if point is None:
            dropped += 1
        else:
            rows.append(point)
    return require_rows(rows, dropped=dropped, ticker=ticker, source=TIINGO_SOURCE)


# ---------------------------------------------------------------------------
# Fallback-aware service
# ---------------------------------------------------------------------------


class FallbackPriceService:
    """Cache-first price fetching that never fails.

    Usage::

        service = FallbackPriceService(source=YFinancePriceSource(limiter), cache=cache)
        series = await service.fetch_prices("AAPL", start, end)
        if series.origin is DataOrigin.SYNTHETIC:
            ...
    """

    def __init__(self, source: PriceDataSource, cache: ServiceCache) -> None:
        self._source = source
        self._cache = cache

    async def fetch_prices(
        self,
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> PriceSeries:
        """Return vendor rows, or the seeded synthetic walk when the vendor fails.

        Successful fetches are cached permanently (history does not change).
        Failures are remembered for an hour so a retry loop over many date
        ranges does not hammer a source that is down for one ticker.
        """
        ticker = ticker.upper().strip()
        window = f"{ticker}:{start_date.isoformat()}:{end_date.isoformat()}"
        cache_key = f"{self._source.name}:{DATA_TYPE_PRICES}:{window}"
        failure_key = f"{self._source.name}:failure:{window}"

        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Cache hit for prices: %s", cache_key)
            return PriceSeries(_deserialize_rows(cached), DataOrigin.HISTORICAL)

        if await self._cache.get(failure_key) is not None:
            logger.info("Recent fetch failure cached for %s; using synthetic series", window)
            return self._synthetic(ticker, start_date, end_date)

        try:
            rows = await self._source.fetch(ticker, start_date, end_date)
        except DataFetchError as exc:
            logger.warning(
                "Price fetch for %s from %s failed (%s: %s); using synthetic series",
                ticker,
                exc.source,
                type(exc).__name__,
                exc,
            )
            await self._cache.set(failure_key, type(exc).__name__, self._cache.get_ttl("failure"))
            return self._synthetic(ticker, start_date, end_date)

        await self._cache.set(
            cache_key, _serialize_rows(rows), self._cache.get_ttl(DATA_TYPE_PRICES)
        )
        logger.info("Fetched %d price rows for %s from %s", len(rows), ticker, self._source.name)
        return PriceSeries(rows, DataOrigin.HISTORICAL)

    @staticmethod
    def _synthetic(
        ticker: str,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> PriceSeries:
        return PriceSeries(
            generate_fallback_series(ticker, start_date, end_date), DataOrigin.SYNTHETIC
        )


def build_price_source(
    source_name: str,
    rate_limiter: RateLimiter,
    tiingo_token: str | None = None,
) -> YFinancePriceSource | TiingoPriceSource:
    """Pick the configured vendor; Tiingo needs a token, else yfinance is used."""
    if source_name == TIINGO_SOURCE:
        if tiingo_token:
            return TiingoPriceSource(api_token=tiingo_token, rate_limiter=rate_limiter)
        logger.warning("Tiingo selected but no API token configured; using yfinance")
    return YFinancePriceSource(rate_limiter=rate_limiter)


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _serialize_rows(rows: list[RawPricePoint]) -> str:
    return json.dumps([row.model_dump(mode="json") for row in rows])


def _deserialize_rows(data: str) -> list[RawPricePoint]:
    raw_list: list[dict[str, object]] = json.loads(data)
    return [RawPricePoint.model_validate(item) for item in raw_list]
