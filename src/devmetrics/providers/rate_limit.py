"""GitHub API rate limit monitoring."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Track ``X-RateLimit-*`` headers and pause before the quota runs out."""

    def __init__(self, threshold: int = 10) -> None:
        self._threshold = threshold
        self._remaining: int | None = None
        self._reset_at: float | None = None

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            self._remaining = int(remaining)
        if reset is not None:
            self._reset_at = float(reset)

    async def wait_if_needed(self) -> None:
        if self._remaining is None or self._reset_at is None:
            return
        if self._remaining > self._threshold:
            return
        wait = max(0.0, self._reset_at - time.time()) + 1
        logger.warning(
            "GitHub rate limit low (%d remaining), waiting %.0fs for reset",
            self._remaining,
            wait,
        )
        await asyncio.sleep(wait)
        self._remaining = None
