# src/llm/retry.py - v2
"""Bounded retry around a single generation attempt.

Every attempt is preceded by a rate-limiter acquire. Failures are logged and
swallowed; once the budget is spent the supervisor gives up quietly and the
caller sees ``False``. Anything ``attempt`` did before failing stays done,
so attempts must be self-contained.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from presetindex.llm.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def classify_error(error: Exception) -> str:
    """Classify an exception into a coarse error type for logging."""
    msg = str(error).lower()
    name = type(error).__name__.lower()

    if "429" in msg or "rate" in name or "rate limit" in msg:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg or "timed out" in msg:
        return "timeout"
    if "connection" in name or "connection" in msg:
        return "transport"
    if any(c in msg for c in ("500", "502", "503", "504")) or "server" in name:
        return "server_error"
    if any(k in msg or k in name for k in ("json", "parse", "decode", "validation")):
        return "parse_error"
    return "unknown"


async def with_retry(
    attempt: Callable[[], Awaitable[None]],
    *,
    rate_limiter: RateLimiter,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    label: str = "generation",
) -> bool:
    """Run ``attempt`` until it succeeds or ``max_attempts`` tries are spent.

    Returns:
        True if an attempt completed, False once the budget is exhausted.
    """
    for n in range(1, max_attempts + 1):
        await rate_limiter.acquire()
        try:
            await attempt()
        except Exception as e:
            logger.warning(
                "%s failed (%s, attempt %d/%d): %s",
                label, classify_error(e), n, max_attempts, e,
            )
            continue
        return True

    logger.error("%s gave up after %d attempts", label, max_attempts)
    return False
