"""Minimum spacing between outbound routing requests."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_INTERVAL = 0.3  # seconds


class RequestThrottle:
    """Suspends callers so that successive acquire() calls are >= interval apart.

    The last-request timestamp is unguarded: acquire() must only be awaited
    from a single sequence of calls. Concurrent planners need a lock here.
    """

    def __init__(
        self,
        interval: float = DEFAULT_REQUEST_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval}")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None

    async def acquire(self) -> None:
        if self._last_request is not None:
            elapsed = self._clock() - self._last_request
            if elapsed < self.interval:
                wait = self.interval - elapsed
                logger.debug("Throttling routing request for %.0fms", wait * 1000)
                sleep = self._sleep or asyncio.sleep
                await sleep(wait)
        self._last_request = self._clock()
