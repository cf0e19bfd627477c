"""Custom exception hierarchy for the Tradle challenge engine.

Data-source failures inherit from DataFetchError, which carries contextual
information about what went wrong during price retrieval. These are always
recovered inside the engine by the synthetic fallback series.

ChallengeGenerationError is the one fatal condition: no viable challenge
could be assembled within the attempt budget.
"""


class DataFetchError(Exception):
    """Base exception for all price-data fetching failures.

    Attributes:
        ticker: The ticker symbol involved in the failure.
        source: The data source that failed (e.g., "yfinance", "tiingo").
        http_status: The HTTP status code, if the failure was HTTP-related.
    """

    def __init__(
        self,
        message: str,
        *,
        ticker: str,
        source: str,
        http_status: int | None = None,
    ) -> None:
        self.ticker = ticker
        self.source = source
        self.http_status = http_status
        super().__init__(message)


class TickerNotFoundError(DataFetchError):
    """Raised when a ticker symbol does not exist in the data source."""


class DataSourceUnavailableError(DataFetchError):
    """Raised when a data source is unreachable or returns malformed data."""


class InsufficientDataError(DataFetchError):
    """Raised when the source returns too few rows for a playable series."""


class RateLimitExceededError(DataFetchError):
    """Raised when the data source rate limit has been hit.

    ``retry_after`` carries the server's Retry-After hint in seconds, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        ticker: str,
        source: str,
        http_status: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, ticker=ticker, source=source, http_status=http_status)


class ChallengeGenerationError(Exception):
    """Raised when no viable challenge could be built within the attempt budget.

    Attributes:
        attempts: Number of stock/date-range candidates that were tried.
    """

    def __init__(self, message: str, *, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message)


class ChallengeExistsError(Exception):
    """Raised when inserting a challenge whose day or date is already stored."""
