# src/llm/rate_limiter.py - v1
"""Minimum-spacing rate limiter shared by every generator call of a run.

The upstream chat API enforces its own requests-per-minute ceiling; calls
are spaced ``60 / limit_per_minute`` seconds apart regardless of which
preset triggered them. Waiters are served in FIFO order.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces successive acquire() returns by a fixed interval.

    Usage:
        limiter = RateLimiter(limit_per_minute=15)
        await limiter.acquire()
    """

    def __init__(
        self,
        limit_per_minute: float = 15,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if limit_per_minute <= 0:
            raise ValueError("limit_per_minute must be > 0")
        self._interval = 60.0 / limit_per_minute
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = asyncio.Lock()

    @property
    def interval_s(self) -> float:
        return self._interval

    async def acquire(self) -> None:
        """Suspend until the interval since the previous acquire() has elapsed."""
        async with self._lock:
            if self._last is not None:
                wait = self._last + self._interval - self._clock()
                if wait > 0:
                    logger.debug("Rate limit: waiting %.2fs", wait)
                    await self._sleep(wait)
            self._last = self._clock()


class NullRateLimiter(RateLimiter):
    """Limiter that never waits."""

    def __init__(self) -> None:
        super().__init__(limit_per_minute=float("inf"))

    async def acquire(self) -> None:
        return None
