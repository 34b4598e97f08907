"""Request pacing for Airtable API operations.

Airtable rejects bursts above a fixed number of requests per second per base,
so every outbound call waits for its slot before being sent.
"""

import asyncio
import time

import structlog

from depviz_airtable.utils.constants import DEFAULT_REQUESTS_PER_SECOND

logger = structlog.get_logger(__name__)


class RateLimiter:
    """Spaces request start times so that at most N requests begin per second.

    Safe to share between concurrent tasks of the same event loop.
    """

    def __init__(self, requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND) -> None:
        """Initialize the rate limiter with the allowed number of requests per second."""
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be greater than zero")
        self.requests_per_second = requests_per_second
        self.interval = 1.0 / requests_per_second
        self.operation_count = 0
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until the next request slot is available."""
        async with self._lock:
            now = time.monotonic()
            wait_time = self._next_slot - now
            if wait_time > 0:
                logger.debug("Waiting for request slot", wait_time=round(wait_time, 3))
                await asyncio.sleep(wait_time)
                now = time.monotonic()
            self._next_slot = max(now, self._next_slot) + self.interval
            self.operation_count += 1
