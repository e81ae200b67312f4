"""
Per-endpoint sliding window rate limiter.

Sandi Metz Principles:
- Single Responsibility: Track request budgets
- Small methods: Each method < 10 lines
- Dependency Injection: Limits and clock injected
"""

from typing import Optional

from esg_cache.models.ratelimit import RateLimitStatus, RateLimitWindow
from esg_cache.utils.clock import Clock, now_ms
from esg_cache.utils.logger import get_logger, log_rate_limited

logger = get_logger(__name__)


class SlidingWindowRateLimiter:
    """
    Advisory request budget per logical endpoint.

    Never sleeps and never calls the network; callers that are denied
    should serve stale or absent data.
    """

    def __init__(self, max_requests: int, window_ms: int, clock: Clock = now_ms):
        """
        Initialize rate limiter.

        Args:
            max_requests: Requests allowed per window
            window_ms: Window length in milliseconds
            clock: Millisecond clock
        """
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}

    def try_acquire(self, endpoint: str) -> bool:
        """
        Record a request if the endpoint has budget left.

        Args:
            endpoint: Logical endpoint name

        Returns:
            True if the caller may call the network now
        """
        now = self._clock()
        window = self._current_window(endpoint, now)

        if len(window.requests) >= self._max_requests:
            log_rate_limited(endpoint, count=len(window.requests), limit=self._max_requests)
            return False

        window.requests.append(now)
        return True

    def _current_window(self, endpoint: str, now: int) -> RateLimitWindow:
        """Get the endpoint window, reset and pruned for now."""
        window = self._windows.get(endpoint)
        if window is None:
            window = RateLimitWindow(window_start=now)
            self._windows[endpoint] = window

        if now - window.window_start > self._window_ms:
            window.requests = []
            window.window_start = now

        window.requests = [t for t in window.requests if now - t < self._window_ms]
        return window

    def _peek_window(self, endpoint: str, now: int) -> RateLimitWindow:
        """Get a pruned view of the endpoint window without recording one."""
        window = self._windows.get(endpoint)
        if window is None or now - window.window_start > self._window_ms:
            return RateLimitWindow(window_start=now)
        live = [t for t in window.requests if now - t < self._window_ms]
        return RateLimitWindow(window_start=window.window_start, requests=live)

    def remaining(self, endpoint: str) -> int:
        """
        Get remaining requests in current window.

        Returns:
            Number of remaining requests
        """
        window = self._peek_window(endpoint, self._clock())
        return max(0, self._max_requests - len(window.requests))

    def retry_after_ms(self, endpoint: str) -> int:
        """
        Get time until the next request would be allowed.

        Returns:
            Milliseconds to wait (0 if allowed now)
        """
        now = self._clock()
        window = self._peek_window(endpoint, now)
        if len(window.requests) < self._max_requests:
            return 0
        oldest = window.requests[0]
        until_prune = oldest + self._window_ms - now
        until_reset = window.window_start + self._window_ms + 1 - now
        return max(0, min(until_prune, until_reset))

    def status(self, endpoint: str) -> RateLimitStatus:
        """Get rate limit status for an endpoint."""
        window = self._peek_window(endpoint, self._clock())
        return RateLimitStatus(
            endpoint=endpoint,
            limit=self._max_requests,
            window_ms=self._window_ms,
            requests_remaining=max(0, self._max_requests - len(window.requests)),
            reset_at=window.window_start + self._window_ms,
        )

    @property
    def tracked_endpoints(self) -> int:
        """Get number of endpoints with a recorded window."""
        return len(self._windows)

    def reset(self, endpoint: Optional[str] = None) -> None:
        """
        Forget recorded requests.

        Args:
            endpoint: Endpoint to reset (all endpoints if None)
        """
        if endpoint is None:
            self._windows.clear()
        else:
            self._windows.pop(endpoint, None)
        logger.debug("Rate limit reset", endpoint=endpoint or "*")
