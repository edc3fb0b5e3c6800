"""Token-bucket rate limiter shared by every request made through one client.

The bucket holds at most ``rps`` tokens and refills at ``rps`` tokens per
second, so aggregate throughput across threads never exceeds ``rps``.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

_logger = logging.getLogger(__name__)


class RateLimiter:
    """Blocking token bucket. ``rps <= 0`` disables limiting."""

    def __init__(
        self,
        rps: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rps = float(rps)
        self._clock = clock
        self._sleep = sleep
        self._capacity = max(self.rps, 1.0)
        self._tokens = self._capacity
        self._updated = clock()
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.rps > 0

    def _refill(self, now: float) -> None:
        elapsed = now - self._updated
        if elapsed > 0:
            self._tokens = min(self._capacity, self._tokens + elapsed * self.rps)
            self._updated = now

    def wait_time(self) -> float:
        """Seconds until the next request would be permitted."""
        if not self.enabled:
            return 0.0
        with self._lock:
            self._refill(self._clock())
            if self._tokens >= 1:
                return 0.0
            return (1 - self._tokens) / self.rps

    def acquire(self) -> None:
        """Block until a request is permitted, then consume one token."""
        if not self.enabled:
            return
        while True:
            with self._lock:
                self._refill(self._clock())
                if self._tokens >= 1:
                    self._tokens -= 1
                    return
                wait = (1 - self._tokens) / self.rps
            _logger.debug("Rate limit reached, waiting %.3fs", wait)
            self._sleep(wait)
