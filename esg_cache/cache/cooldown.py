"""
Provider cooldown tracking.

Sandi Metz Principles:
- Single Responsibility: Remember provider-side rate limiting
- Small methods: Each method < 10 lines
- Clear naming: Self-documenting code
"""

from dataclasses import dataclass
from typing import Any, Optional

from esg_cache.utils.clock import Clock, now_ms
from esg_cache.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CooldownState:
    """Cooldown bookkeeping for one endpoint."""

    until: int
    retries: int


class ProviderCooldown:
    """
    Backs off an endpoint after the provider itself answered 429.

    Complements the local limiter, which only governs our own budget.
    """

    def __init__(self, cooldown_ms: int = 60_000, max_retries: int = 3, clock: Clock = now_ms):
        """
        Initialize cooldown tracker.

        Args:
            cooldown_ms: Default back-off length in milliseconds
            max_retries: Cooldowns tolerated before retries stop
            clock: Millisecond clock
        """
        self._cooldown_ms = cooldown_ms
        self._max_retries = max_retries
        self._clock = clock
        self._states: dict[str, CooldownState] = {}
        self._fallback_active: set[str] = set()

    def mark_rate_limited(self, endpoint: str, retry_after_ms: Optional[int] = None) -> None:
        """
        Start a cooldown for an endpoint.

        Args:
            endpoint: Logical endpoint name
            retry_after_ms: Provider-suggested wait (default cooldown if None)
        """
        wait = retry_after_ms if retry_after_ms is not None else self._cooldown_ms
        retries = self.retry_count(endpoint) + 1
        self._states[endpoint] = CooldownState(until=self._clock() + wait, retries=retries)
        logger.warning("Provider cooldown started", endpoint=endpoint, wait_ms=wait, retries=retries)

    def is_rate_limited(self, endpoint: str) -> bool:
        """Check if the endpoint is still cooling down."""
        state = self._states.get(endpoint)
        if state is None:
            return False
        return self._clock() <= state.until

    def retry_count(self, endpoint: str) -> int:
        """Get number of cooldowns since the last success."""
        state = self._states.get(endpoint)
        return state.retries if state else 0

    def can_retry(self, endpoint: str) -> bool:
        """Check if a new provider call is worth attempting."""
        return not self.is_rate_limited(endpoint) and self.retry_count(endpoint) < self._max_retries

    def clear(self, endpoint: str) -> None:
        """Forget cooldown state after a successful call."""
        self._states.pop(endpoint, None)
        self._fallback_active.discard(endpoint)

    def set_fallback_active(self, endpoint: str, active: bool) -> None:
        """Record whether callers are being served fallback data."""
        if active:
            self._fallback_active.add(endpoint)
        else:
            self._fallback_active.discard(endpoint)

    def is_fallback_active(self, endpoint: str) -> bool:
        """Check if callers are being served fallback data."""
        return endpoint in self._fallback_active

    def status(self, endpoint: str) -> dict[str, Any]:
        """
        Get cooldown status.

        Returns:
            Dictionary with rate-limit, fallback and retry state
        """
        return {
            "is_rate_limited": self.is_rate_limited(endpoint),
            "is_fallback_active": self.is_fallback_active(endpoint),
            "retry_count": self.retry_count(endpoint),
            "can_retry": self.can_retry(endpoint),
        }
