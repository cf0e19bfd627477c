"""Tests for the RateLimiter request gate.

Covers:
- acquire()/release() serialize requests
- The minimum interval is enforced between request starts
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from Tradle.services.rate_limiter import RateLimiter


class TestGate:
    @pytest.mark.asyncio()
    async def test_first_request_is_immediate(self) -> None:
        limiter = RateLimiter(min_interval=5.0)
        assert limiter.seconds_until_ready() == 0.0
        with patch("Tradle.services.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            await limiter.acquire()
            limiter.release()
        sleep.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_second_request_waits_for_interval(self) -> None:
        limiter = RateLimiter(min_interval=5.0)
        with patch("Tradle.services.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            await limiter.acquire()
            limiter.release()
            await limiter.acquire()
            limiter.release()
        sleep.assert_awaited_once()
        waited = sleep.await_args.args[0]
        assert 4.0 < waited <= 5.0

    @pytest.mark.asyncio()
    async def test_zero_interval_never_waits(self) -> None:
        limiter = RateLimiter(min_interval=0.0)
        with patch("Tradle.services.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            for _ in range(3):
                await limiter.acquire()
                limiter.release()
        sleep.assert_not_awaited()
        assert limiter.seconds_until_ready() == 0.0

    @pytest.mark.asyncio()
    async def test_only_one_request_in_flight(self) -> None:
        limiter = RateLimiter(min_interval=0.0)
        await limiter.acquire()
        second = asyncio.create_task(limiter.acquire())
        await asyncio.sleep(0.01)
        assert not second.done()

        limiter.release()
        await asyncio.wait_for(second, timeout=1.0)
        limiter.release()
