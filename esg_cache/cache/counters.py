"""
Lookup counters.
"""

from dataclasses import dataclass

from esg_cache.models.statistics import PerformanceMetrics


@dataclass
class CacheCounters:
    """Process-lifetime hit/miss counters."""

    hits: int = 0
    misses: int = 0
    total_requests: int = 0

    def record_hit(self) -> None:
        """Count a lookup that returned data."""
        self.total_requests += 1
        self.hits += 1

    def record_miss(self) -> None:
        """Count a lookup that returned nothing."""
        self.total_requests += 1
        self.misses += 1

    def reset(self) -> None:
        """Reset all counters to zero."""
        self.hits = 0
        self.misses = 0
        self.total_requests = 0

    def snapshot(self) -> PerformanceMetrics:
        """Get counters as performance metrics."""
        return PerformanceMetrics.create(hits=self.hits, misses=self.misses)
