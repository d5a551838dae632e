"""Track GitHub API rate-limit headers and pause before the quota runs out."""

from __future__ import annotations

import asyncio
import logging
import threading
import time

import httpx

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Remembers the last seen ``X-RateLimit-*`` headers.

    Both the async and the blocking request paths of a service report to the
    same monitor, so updates are guarded by a lock.
    """

    def __init__(self, threshold: int = 10) -> None:
        self.threshold = threshold
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._lock = threading.Lock()

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")
        with self._lock:
            if remaining is not None:
                self._remaining = int(remaining)
            if reset is not None:
                self._reset_at = float(reset)

    def _pause_seconds(self) -> float:
        with self._lock:
            if self._remaining is None or self._reset_at is None:
                return 0.0
            if self._remaining > self.threshold:
                return 0.0
            pause = max(0.0, self._reset_at - time.time()) + 1
        logger.warning(
            "Rate limit nearly exhausted (%d left), pausing %.0fs", self._remaining, pause
        )
        return pause

    async def wait_if_needed(self) -> None:
        pause = self._pause_seconds()
        if pause:
            await asyncio.sleep(pause)

    def block_if_needed(self) -> None:
        pause = self._pause_seconds()
        if pause:
            time.sleep(pause)
