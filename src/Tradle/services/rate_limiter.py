"""Async request gate with a minimum interval between upstream calls.

Historical-price vendors throttle by "time since last request", so the gate
is a simple interval lock rather than a token bucket: one request in flight,
and each request starts at least ``min_interval`` seconds after the previous
one started. Retrying is the caller's job (see ``fetch_with_retry``).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Final

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MIN_INTERVAL_SECONDS: Final[float] = 1.0


class RateLimiter:
    """Serialize requests and space them by a minimum interval.

    Usage::

        limiter = RateLimiter(min_interval=1.0)

        await limiter.acquire()
        try:
            rows = await some_http_call()
        finally:
            limiter.release()
    """

    def __init__(self, min_interval: float = DEFAULT_MIN_INTERVAL_SECONDS) -> None:
        self._min_interval = min_interval
        self._lock = asyncio.Lock()
        self._last_request_time: float | None = None

        logger.info("RateLimiter initialized: min_interval=%.2fs", min_interval)

    async def acquire(self) -> None:
        """Block until no request is in flight and the interval has elapsed."""
        await self._lock.acquire()
        wait = self.seconds_until_ready()
        if wait > 0:
            logger.debug("Request gate waiting %.2fs", wait)
            await asyncio.sleep(wait)
        self._last_request_time = time.monotonic()

    def release(self) -> None:
        """Let the next request through the gate."""
        self._lock.release()

    def seconds_until_ready(self) -> float:
        """Seconds left before the next request may start (0 when ready)."""
        if self._last_request_time is None:
            return 0.0
        elapsed = time.monotonic() - self._last_request_time
        return max(0.0, self._min_interval - elapsed)
