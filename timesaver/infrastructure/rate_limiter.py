"""Per-client sliding window rate limiter."""
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

from timesaver.core.logging import get_logger

logger = get_logger(__name__)


class SlidingWindowRateLimiter:
    """
    Sliding window rate limiter keyed by client identifier.

    Tracks request timestamps per identifier and rejects requests once the
    identifier has used up ``max_requests`` in the last ``window_seconds``.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maximum requests allowed per window
            window_seconds: Time window duration in seconds
            clock: Monotonic time source, injectable for tests
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def hit(self, identifier: str) -> Optional[int]:
        """
        Record a request for ``identifier``.

        Returns:
            None when the request is allowed, otherwise the number of seconds
            until the oldest request leaves the window.
        """
        now = self._clock()
        self._sweep_expired(now)
        window = self._requests.setdefault(identifier, deque())
        self._clean_old_requests(window, now)

        if len(window) >= self.max_requests:
            retry_after = int(self.window_seconds - (now - window[0])) + 1
            logger.warning(
                f"Rate limit exceeded for {identifier}: "
                f"{len(window)}/{self.max_requests} requests in {self.window_seconds}s"
            )
            return retry_after

        window.append(now)
        return None

    def remaining(self, identifier: str) -> int:
        """Requests left in the current window for ``identifier``."""
        window = self._requests.get(identifier)
        if not window:
            return self.max_requests
        self._clean_old_requests(window, self._clock())
        if not window:
            del self._requests[identifier]
        return max(self.max_requests - len(window), 0)

    @property
    def tracked_identifiers(self) -> int:
        return len(self._requests)

    def reset(self) -> None:
        self._requests.clear()
        self._last_sweep = self._clock()

    def _sweep_expired(self, now: float) -> None:
        """Drop identifiers with no requests left in the window, at most once per window."""
        if now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now

        for identifier in list(self._requests):
            window = self._requests[identifier]
            self._clean_old_requests(window, now)
            if not window:
                del self._requests[identifier]

    def _clean_old_requests(self, window: Deque[float], now: float) -> None:
        """Remove requests outside the current window."""
        window_start = now - self.window_seconds

        while window and window[0] <= window_start:
            window.popleft()
