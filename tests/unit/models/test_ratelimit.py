"""Test rate limiting models."""

import pytest
from pydantic import ValidationError

from esg_cache.models.ratelimit import RateLimitStatus, RateLimitWindow


class TestRateLimitStatus:
    """Test rate limit status model."""

    def test_should_report_usage(self):
        """Test derived usage fields."""
        status = RateLimitStatus(
            endpoint="esg", limit=100, window_ms=60_000, requests_remaining=25, reset_at=0
        )

        assert status.requests_used == 75
        assert status.usage_percentage == 75.0
        assert status.is_exceeded is False

    def test_should_detect_exceeded_limit(self):
        """Test exceeded flag."""
        status = RateLimitStatus(
            endpoint="esg", limit=1, window_ms=1000, requests_remaining=0, reset_at=0
        )
        assert status.is_exceeded is True

    def test_should_reject_remaining_above_limit(self):
        """Test remaining cannot exceed limit."""
        with pytest.raises(ValidationError):
            RateLimitStatus(
                endpoint="esg", limit=1, window_ms=1000, requests_remaining=2, reset_at=0
            )


class TestRateLimitWindow:
    """Test rate limit window."""

    def test_should_start_empty(self):
        """Test default request list."""
        window = RateLimitWindow(window_start=10)

        assert window.requests == []
        assert window.window_start == 10
