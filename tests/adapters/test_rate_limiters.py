"""
Tests for rate limiter adapters.

All timing runs on a virtual clock; no test actually sleeps.
"""

import pytest

from src.route_profit.adapters.rate_limiters import (
    FixedIntervalRateLimiter,
    MonotonicClock,
    TokenBucketRateLimiter,
)
from src.route_profit.ports.rate_limiter import Clock


class TestFixedIntervalRateLimiter:
    @pytest.mark.anyio
    async def test_first_acquire_is_immediate(self, virtual_clock):
        limiter = FixedIntervalRateLimiter(0.15, clock=virtual_clock)

        await limiter.acquire()

        assert virtual_clock.sleeps == []

    @pytest.mark.anyio
    async def test_consecutive_acquires_are_spaced(self, virtual_clock):
        limiter = FixedIntervalRateLimiter(0.15, clock=virtual_clock)

        for _ in range(4):
            await limiter.acquire()

        assert virtual_clock.time == pytest.approx(0.45)

    @pytest.mark.anyio
    async def test_elapsed_time_counts_towards_interval(self, virtual_clock):
        """Work between acquires (e.g. the fetch itself) shortens the wait."""
        limiter = FixedIntervalRateLimiter(0.15, clock=virtual_clock)

        await limiter.acquire()
        virtual_clock.time += 0.1
        await limiter.acquire()

        assert virtual_clock.sleeps == [pytest.approx(0.05)]

    @pytest.mark.anyio
    async def test_no_wait_after_long_gap(self, virtual_clock):
        limiter = FixedIntervalRateLimiter(0.15, clock=virtual_clock)

        await limiter.acquire()
        virtual_clock.time += 5.0
        await limiter.acquire()

        assert virtual_clock.sleeps == []

    @pytest.mark.anyio
    async def test_interval_counts_from_release(self, virtual_clock):
        """A request that outlasts the interval still gets the full pause after it."""
        limiter = FixedIntervalRateLimiter(0.15, clock=virtual_clock)

        await limiter.acquire()
        virtual_clock.time += 0.4
        limiter.release()
        await limiter.acquire()

        assert virtual_clock.sleeps == [pytest.approx(0.15)]

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            FixedIntervalRateLimiter(-0.1)

    def test_interval_property(self):
        assert FixedIntervalRateLimiter(0.25).interval_seconds == 0.25


class TestTokenBucketRateLimiter:
    @pytest.mark.anyio
    async def test_burst_up_to_capacity(self, virtual_clock):
        limiter = TokenBucketRateLimiter(rate_per_second=2.0, capacity=3, clock=virtual_clock)

        for _ in range(3):
            await limiter.acquire()

        assert virtual_clock.sleeps == []

    @pytest.mark.anyio
    async def test_waits_for_refill_when_empty(self, virtual_clock):
        limiter = TokenBucketRateLimiter(rate_per_second=2.0, capacity=1, clock=virtual_clock)

        await limiter.acquire()
        await limiter.acquire()

        assert virtual_clock.time == pytest.approx(0.5)

    @pytest.mark.parametrize("kwargs", [{"rate_per_second": 0}, {"rate_per_second": 1, "capacity": 0.5}])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            TokenBucketRateLimiter(**kwargs)


def test_monotonic_clock_satisfies_protocol():
    clock = MonotonicClock()
    assert isinstance(clock, Clock)
    assert clock.now() <= clock.now()
