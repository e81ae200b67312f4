"""
Cache statistics reporter.

Recomputes store statistics with a full scan on every call so the
numbers always match what is physically stored.
"""

from esg_cache.cache.counters import CacheCounters
from esg_cache.cache.entry_store import EntryStore
from esg_cache.exceptions import StorageError
from esg_cache.models.statistics import CacheStatistics, PerformanceMetrics
from esg_cache.utils.logger import get_logger, log_error

logger = get_logger(__name__)


class StatisticsReporter:
    """Aggregates counters and physical store state."""

    def __init__(self, store: EntryStore, counters: CacheCounters):
        """
        Initialize reporter.

        Args:
            store: Entry store to scan
            counters: Cumulative hit/miss counters
        """
        self._store = store
        self._counters = counters

    def stats(self) -> CacheStatistics:
        """
        Scan the store and build statistics.

        Expired entries still occupying storage are counted.

        Returns:
            Cache statistics (empty snapshot if storage fails)
        """
        metrics = self.performance_metrics()

        try:
            entries, _ = self._store.scan()
        except StorageError as e:
            log_error(e, context="cache_stats")
            return CacheStatistics.empty(metrics)

        if not entries:
            return CacheStatistics.empty(metrics)

        timestamps = [entry.timestamp for _, entry in entries]
        return CacheStatistics(
            total_entries=len(entries),
            total_size=sum(entry.size for _, entry in entries),
            hit_rate=metrics.hit_rate,
            miss_rate=metrics.miss_rate,
            oldest_entry=min(timestamps),
            newest_entry=max(timestamps),
        )

    def performance_metrics(self) -> PerformanceMetrics:
        """Get cumulative hit/miss metrics (no store scan)."""
        return self._counters.snapshot()
