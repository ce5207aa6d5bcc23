"""Rate limiting for Aqara API requests.

This module provides the RateLimiter class that handles:
- Bounded concurrency (at most ``max_concurrent`` requests in flight)
- Minimum spacing between request starts
- First-in, first-out start order
- Abandoning queued requests on shutdown

With the defaults (3 concurrent, 200 ms spacing) the effective ceiling is
5 requests per second. Throttled requests wait; they never fail because of
throttling.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..constants import API_DEFAULTS
from .errors import AqaraLimiterStoppedError

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = API_DEFAULTS.MAX_CONCURRENT
DEFAULT_MIN_REQUEST_INTERVAL = API_DEFAULTS.MIN_REQUEST_INTERVAL

T = TypeVar("T")


class RateLimiter:
    """Schedules API requests under a concurrency bound and start spacing.

    Requests queue on a start lock, which asyncio grants in arrival order.
    The head of the queue takes a concurrency slot, waits out the minimum
    interval since the previous start and then releases the lock to the next
    request while its own call runs.

    Attributes:
        max_concurrent: Maximum number of requests executing at once
        min_request_interval: Minimum seconds between two request starts
    """

    def __init__(
        self,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        min_request_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
    ):
        """Initialize the RateLimiter.

        Args:
            max_concurrent: Maximum number of requests executing at once
            min_request_interval: Minimum seconds between two request starts
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.max_concurrent = max_concurrent
        self.min_request_interval = min_request_interval

        self._start_lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent)
        self._last_start_time: float | None = None
        self._queued = 0
        self._running = 0
        self._stopped = False

    # -------------------------------------------------------------------------
    # Time utilities
    # -------------------------------------------------------------------------

    def _get_current_time(self) -> float:
        """Get current monotonic time for rate limiting."""
        return asyncio.get_event_loop().time()

    async def _wait_for_spacing(self) -> None:
        """Sleep until ``min_request_interval`` has passed since the last start."""
        if self._last_start_time is None:
            return

        while True:
            elapsed = self._get_current_time() - self._last_start_time
            wait_time = self.min_request_interval - elapsed
            if wait_time <= 0:
                return
            _LOGGER.debug("Rate limiting: waiting %.3fs before request", wait_time)
            await asyncio.sleep(wait_time)

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    async def schedule(self, coro_factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``coro_factory()`` once the limiter admits it.

        Args:
            coro_factory: Callable that returns the coroutine to execute

        Returns:
            Result of the coroutine

        Raises:
            AqaraLimiterStoppedError: If the limiter was stopped while queued
        """
        self._queued += 1
        try:
            async with self._start_lock:
                if self._stopped:
                    raise AqaraLimiterStoppedError("Rate limiter stopped; request abandoned")
                await self._slots.acquire()
                try:
                    await self._wait_for_spacing()
                    if self._stopped:
                        raise AqaraLimiterStoppedError("Rate limiter stopped; request abandoned")
                except BaseException:
                    self._slots.release()
                    raise
                self._last_start_time = self._get_current_time()
        finally:
            self._queued -= 1

        self._running += 1
        try:
            return await coro_factory()
        finally:
            self._running -= 1
            self._slots.release()

    def stop(self) -> None:
        """Abandon queued requests. Requests already running are not touched."""
        self._stopped = True
        _LOGGER.debug("Rate limiter stopped with %d queued requests", self._queued)

    @property
    def stopped(self) -> bool:
        """True once ``stop`` was called."""
        return self._stopped

    def counts(self) -> dict:
        """Number of queued and running requests."""
        return {"queued": self._queued, "running": self._running}
