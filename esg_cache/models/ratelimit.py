"""
Rate limiting models.

Sandi Metz Principles:
- Small classes with clear purpose
- Clear naming conventions
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, model_validator


@dataclass
class RateLimitWindow:
    """Request timestamps (epoch ms) recorded for one endpoint."""

    window_start: int
    requests: list[int] = field(default_factory=list)


class RateLimitStatus(BaseModel):
    """Rate limit state of one endpoint."""

    endpoint: str = Field(..., description="Logical endpoint name")
    limit: int = Field(..., ge=1, description="Requests allowed per window")
    window_ms: int = Field(..., ge=1, description="Window length in ms")
    requests_remaining: int = Field(..., ge=0, description="Requests left in window")
    reset_at: int = Field(..., ge=0, description="When the window resets (epoch ms)")

    @model_validator(mode="after")
    def validate_requests_remaining(self) -> "RateLimitStatus":
        """Validate requests_remaining doesn't exceed limit."""
        if self.requests_remaining > self.limit:
            raise ValueError(
                f"requests_remaining ({self.requests_remaining}) cannot exceed "
                f"limit ({self.limit})"
            )
        return self

    @property
    def is_exceeded(self) -> bool:
        """Check if rate limit is exceeded."""
        return self.requests_remaining == 0

    @property
    def requests_used(self) -> int:
        """Get number of requests used."""
        return self.limit - self.requests_remaining

    @property
    def usage_percentage(self) -> float:
        """Get usage as percentage (0.0-100.0)."""
        return (self.requests_used / self.limit) * 100.0
