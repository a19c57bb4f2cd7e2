"""
Rate limiter implementations for route quote requests.
"""

import asyncio
import logging
import time
from typing import Optional

from src.route_profit.ports.rate_limiter import Clock, RateLimiter

logger = logging.getLogger(__name__)


class MonotonicClock:
    """Wall clock backed by time.monotonic() and asyncio.sleep()."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class FixedIntervalRateLimiter(RateLimiter):
    """
    Enforces a minimum interval between consecutive acquisitions.

    The first acquisition passes immediately; each following one waits
    until interval_seconds have passed since the previous request was
    released (or, without a release, since it was acquired). A slow
    request therefore never eats into the pause before the next one.

    Attributes:
        _interval: Minimum spacing in seconds.
        _clock: Time source.
        _last: Time of the previous acquisition or release, None before the first.
    """

    def __init__(self, interval_seconds: float, clock: Optional[Clock] = None) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        self._interval = interval_seconds
        self._clock = clock or MonotonicClock()
        self._last: Optional[float] = None

    async def acquire(self) -> None:
        if self._last is not None:
            wait = self._last + self._interval - self._clock.now()
            if wait > 0:
                await self._clock.sleep(wait)
        self._last = self._clock.now()

    def release(self) -> None:
        self._last = self._clock.now()

    @property
    def interval_seconds(self) -> float:
        return self._interval


class TokenBucketRateLimiter(RateLimiter):
    """
    Token bucket: allows bursts of up to `capacity` requests, refilled
    at `rate_per_second`. A capacity of 1 behaves like a fixed interval
    of 1 / rate_per_second.

    Attributes:
        _rate: Tokens added per second.
        _capacity: Maximum stored tokens.
        _tokens: Tokens currently available.
        _updated_at: Time of the last refill.
    """

    def __init__(
        self,
        rate_per_second: float,
        capacity: float = 1.0,
        clock: Optional[Clock] = None,
    ) -> None:
        if rate_per_second <= 0:
            raise ValueError(f"rate_per_second must be > 0, got {rate_per_second}")
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._rate = rate_per_second
        self._capacity = capacity
        self._clock = clock or MonotonicClock()
        self._tokens = capacity
        self._updated_at = self._clock.now()

    def _refill(self) -> None:
        now = self._clock.now()
        elapsed = max(0.0, now - self._updated_at)
        self._tokens = min(self._capacity, self._tokens + elapsed * self._rate)
        self._updated_at = now

    async def acquire(self) -> None:
        self._refill()
        while self._tokens < 1:
            wait = (1 - self._tokens) / self._rate
            logger.debug("Rate limit reached, waiting %.3fs", wait)
            await self._clock.sleep(wait)
            self._refill()
        self._tokens -= 1
