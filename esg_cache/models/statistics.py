"""
Cache statistics models.

Sandi Metz Principles:
- Small classes with clear purpose
- Computed properties for derived metrics
- Clear naming conventions
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


def _percentage(part: int, total: int) -> float:
    """Get part/total as a percentage rounded to two decimals."""
    if total <= 0:
        return 0.0
    return round(part / total * 100.0, 2)


class PerformanceMetrics(BaseModel):
    """Cumulative hit/miss counters since process start (or last clear)."""

    hits: int = Field(..., ge=0, description="Cache hits")
    misses: int = Field(..., ge=0, description="Cache misses")
    total_requests: int = Field(..., ge=0, description="Cache lookups")
    hit_rate: float = Field(..., ge=0.0, le=100.0, description="Hit percentage")
    miss_rate: float = Field(..., ge=0.0, le=100.0, description="Miss percentage")

    @model_validator(mode="after")
    def validate_counter_consistency(self) -> "PerformanceMetrics":
        """Validate total equals hits + misses."""
        if self.total_requests != self.hits + self.misses:
            raise ValueError(
                f"total_requests ({self.total_requests}) must equal hits "
                f"({self.hits}) + misses ({self.misses})"
            )
        return self

    @classmethod
    def create(cls, hits: int, misses: int) -> "PerformanceMetrics":
        """
        Create metrics with calculated rates.

        Args:
            hits: Cache hits
            misses: Cache misses

        Returns:
            PerformanceMetrics instance
        """
        total = hits + misses
        return cls(
            hits=hits,
            misses=misses,
            total_requests=total,
            hit_rate=_percentage(hits, total),
            miss_rate=_percentage(misses, total),
        )

    @classmethod
    def empty(cls) -> "PerformanceMetrics":
        """Create metrics for a cache with no lookups yet."""
        return cls.create(hits=0, misses=0)


class CacheStatistics(BaseModel):
    """Snapshot of the physical store plus cumulative rates."""

    total_entries: int = Field(..., ge=0, description="Entries physically present")
    total_size: int = Field(..., ge=0, description="Sum of entry sizes in bytes")
    hit_rate: float = Field(..., ge=0.0, le=100.0, description="Hit percentage")
    miss_rate: float = Field(..., ge=0.0, le=100.0, description="Miss percentage")
    oldest_entry: Optional[int] = Field(None, description="Oldest creation time")
    newest_entry: Optional[int] = Field(None, description="Newest creation time")

    @classmethod
    def empty(cls, metrics: Optional[PerformanceMetrics] = None) -> "CacheStatistics":
        """Create statistics for an empty store."""
        metrics = metrics or PerformanceMetrics.empty()
        return cls(
            total_entries=0,
            total_size=0,
            hit_rate=metrics.hit_rate,
            miss_rate=metrics.miss_rate,
        )

    @property
    def efficiency(self) -> str:
        """Get human-readable cache efficiency rating."""
        if self.hit_rate > 70.0:
            return "excellent"
        elif self.hit_rate > 40.0:
            return "good"
        return "poor"

    def storage_usage(self, max_size_bytes: int) -> float:
        """
        Get storage usage as a percentage of the size budget.

        Args:
            max_size_bytes: Size budget in bytes

        Returns:
            Usage percentage (may exceed 100 between cleanups)
        """
        if max_size_bytes <= 0:
            return 0.0
        return round(self.total_size / max_size_bytes * 100.0, 2)
