"""Implementation of a rate limiter.

Controls the frequency of outgoing requests to stay under the platform's
request quota. Uses a sliding window over recorded request timestamps.

This is advisory, local throttling: separate limiter instances do not
coordinate with each other.
"""

import logging
import time
from collections import deque
from typing import Callable, Deque

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 100
DEFAULT_WINDOW_MS = 60000


class RateLimiter:
    """Simple sliding window rate limiter.

    Callers check ``can_make_request()`` and, only if it returned True, call
    ``record_request()`` once the request is dispatched.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_ms: float = DEFAULT_WINDOW_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the rate limiter.

        Args:
            max_requests: Maximum number of requests allowed in the window.
            window_ms: Length of the sliding window in milliseconds.
            clock: Returns the current time in seconds.
        """
        self.max_requests = max_requests
        self.window_ms = window_ms
        self._clock = clock
        self.timestamps: Deque[float] = deque()  # milliseconds, oldest first
        logger.debug(f"RateLimiter initialized: {max_requests} requests / {window_ms} ms")

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _cleanup_timestamps(self, now: float) -> None:
        """Removes timestamps that have left the window."""
        while self.timestamps and now - self.timestamps[0] >= self.window_ms:
            self.timestamps.popleft()

    def can_make_request(self) -> bool:
        """Checks whether a request can be made now without exceeding the limit."""
        self._cleanup_timestamps(self._now_ms())
        return len(self.timestamps) < self.max_requests

    def record_request(self) -> None:
        """Records a request made now."""
        self.timestamps.append(self._now_ms())

    def get_remaining_requests(self) -> int:
        """Number of requests still allowed in the current window."""
        self._cleanup_timestamps(self._now_ms())
        return max(0, self.max_requests - len(self.timestamps))

    def get_time_until_next_request(self) -> float:
        """Milliseconds until a request can be made; 0 if one can be made now."""
        if self.can_make_request():
            return 0.0

        oldest = self.timestamps[0]
        wait_ms = self.window_ms - (self._now_ms() - oldest)
        logger.debug(f"Rate limit reached. Next request allowed in {wait_ms:.0f} ms.")
        return max(0.0, wait_ms)
