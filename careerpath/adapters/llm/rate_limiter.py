"""Rate limiting for generation calls.

Sliding window rate limiter so bursts of dashboard requests (each of which
may retry up to three times) stay under the provider's quota.
"""

import asyncio
import time
from typing import Awaitable, Callable, List


class RateLimiter:
    """Sliding window rate limiter for API calls.

    Tracks request start times over the last minute and delays new
    requests when the window is full.
    """

    WINDOW_SECONDS = 60.0

    def __init__(
        self,
        requests_per_minute: int = 50,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize rate limiter.

        Args:
            requests_per_minute: Maximum requests allowed per minute
            clock: Monotonic clock, injectable for tests
            sleep: Awaitable sleep, injectable for tests
        """
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.requests_per_minute = requests_per_minute
        self._clock = clock
        self._sleep = sleep
        self._requests: List[float] = []
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        window_start = now - self.WINDOW_SECONDS
        self._requests = [r for r in self._requests if r > window_start]

    async def acquire(self) -> None:
        """Wait until a request slot is free, then claim it."""
        async with self._lock:
            now = self._clock()
            self._prune(now)

            # Full window: wait for the oldest request to leave it
            if len(self._requests) >= self.requests_per_minute:
                wait = self._requests[0] + self.WINDOW_SECONDS - now
                if wait > 0:
                    await self._sleep(wait)
                now = self._clock()
                self._prune(now)

            self._requests.append(now)

    def current_usage(self) -> int:
        """Number of requests in the current window."""
        self._prune(self._clock())
        return len(self._requests)

    def reset(self) -> None:
        self._requests = []
