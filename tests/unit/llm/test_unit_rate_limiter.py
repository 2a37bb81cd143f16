# tests/unit/llm/test_unit_rate_limiter.py - v1
"""Tests for llm/rate_limiter.py - global minimum spacing between calls."""

from __future__ import annotations

import asyncio
import time

import pytest

from presetindex.llm.rate_limiter import NullRateLimiter, RateLimiter


class TestRateLimiter:
    def test_interval_from_limit(self):
        assert RateLimiter(limit_per_minute=15).interval_s == pytest.approx(4.0)

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            RateLimiter(limit_per_minute=0)

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, fake_clock):
        limiter = RateLimiter(15, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_consecutive_acquires_are_spaced(self, fake_clock):
        limiter = RateLimiter(15, clock=fake_clock, sleep=fake_clock.sleep)
        starts = []
        for _ in range(5):
            await limiter.acquire()
            starts.append(fake_clock())
        gaps = [b - a for a, b in zip(starts, starts[1:])]
        assert all(g >= 4.0 for g in gaps)

    @pytest.mark.asyncio
    async def test_elapsed_time_is_credited(self, fake_clock):
        limiter = RateLimiter(15, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        fake_clock.now += 3.0
        await limiter.acquire()
        assert fake_clock.sleeps == [pytest.approx(1.0)]

    @pytest.mark.asyncio
    async def test_no_wait_after_long_pause(self, fake_clock):
        limiter = RateLimiter(15, clock=fake_clock, sleep=fake_clock.sleep)
        await limiter.acquire()
        fake_clock.now += 60.0
        await limiter.acquire()
        assert fake_clock.sleeps == []

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_spacing(self, fake_clock):
        limiter = RateLimiter(30, clock=fake_clock, sleep=fake_clock.sleep)
        starts: list[float] = []

        async def caller():
            await limiter.acquire()
            starts.append(fake_clock())

        await asyncio.gather(*(caller() for _ in range(4)))
        starts.sort()
        gaps = [b - a for a, b in zip(starts, starts[1:])]
        assert len(starts) == 4
        assert all(g >= 2.0 for g in gaps)

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self):
        limiter = RateLimiter(limit_per_minute=1200)  # 50ms
        t0 = time.monotonic()
        for _ in range(3):
            await limiter.acquire()
        assert time.monotonic() - t0 >= 0.09


class TestNullRateLimiter:
    @pytest.mark.asyncio
    async def test_never_waits(self):
        limiter = NullRateLimiter()
        t0 = time.monotonic()
        for _ in range(10):
            await limiter.acquire()
        assert time.monotonic() - t0 < 0.5
