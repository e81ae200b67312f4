"""
Eviction policy.

Ranks entries by a retention score that combines access frequency,
age and staleness:

    score = access_count / (age_days + 1) / (hours_since_last_access + 1)

Lowest scores are evicted first when the store is over its low-water
marks.
"""

from dataclasses import dataclass

from esg_cache.cache.entry_store import EntryStore
from esg_cache.cache.statistics import StatisticsReporter
from esg_cache.config import CacheSettings
from esg_cache.exceptions import StorageError
from esg_cache.models.cache_entry import CacheEntry
from esg_cache.utils.clock import MS_PER_DAY, MS_PER_HOUR, Clock
from esg_cache.utils.logger import get_logger, log_error

logger = get_logger(__name__)


def retention_score(entry: CacheEntry, now: int) -> float:
    """
    Calculate how valuable an entry is to keep.

    Args:
        entry: Cache entry
        now: Current time (epoch ms)

    Returns:
        Score, higher is more valuable
    """
    age_days = entry.age_ms(now) / MS_PER_DAY
    idle_hours = entry.idle_ms(now) / MS_PER_HOUR
    return entry.access_count / (age_days + 1) / (idle_hours + 1)


@dataclass
class CleanupReport:
    """Outcome of one cleanup pass."""

    expired_removed: int = 0
    invalid_removed: int = 0
    evicted: int = 0
    remaining: int = 0

    @property
    def total_removed(self) -> int:
        """Get number of records removed."""
        return self.expired_removed + self.invalid_removed + self.evicted


class EvictionPolicy:
    """
    Admission and eviction decisions for the entry store.

    Not atomic: concurrent writers may briefly push the store past its
    limits until the next cleanup.
    """

    def __init__(
        self,
        store: EntryStore,
        reporter: StatisticsReporter,
        settings: CacheSettings,
        clock: Clock,
    ):
        """
        Initialize eviction policy.

        Args:
            store: Entry store
            reporter: Statistics reporter for size/count checks
            settings: Capacity settings
            clock: Millisecond clock
        """
        self._store = store
        self._reporter = reporter
        self._settings = settings
        self._clock = clock

    def should_cache(self, entry: CacheEntry) -> bool:
        """
        Decide whether a candidate entry may be written.

        Runs a cleanup pass when size or count limits would be exceeded.

        Args:
            entry: Candidate entry

        Returns:
            True if the entry fits, False to skip the write
        """
        stats = self._reporter.stats()

        if stats.total_size + entry.size > self._settings.max_cache_size_bytes:
            logger.info("Cache size limit reached, cleaning up", size=stats.total_size)
            self.cleanup()
            stats = self._reporter.stats()
            if stats.total_size + entry.size > self._settings.max_cache_size_bytes:
                return False

        if stats.total_entries >= self._settings.max_entries:
            logger.info("Cache entry limit reached, cleaning up", count=stats.total_entries)
            self.cleanup()
            stats = self._reporter.stats()
            if stats.total_entries >= self._settings.max_entries:
                return False

        return True

    def cleanup(self) -> CleanupReport:
        """
        Remove expired and invalid entries, then evict low-value ones.

        Returns:
            Cleanup report (empty if storage cannot be scanned)
        """
        now = self._clock()
        report = CleanupReport()

        try:
            entries, invalid = self._store.scan()
        except StorageError as e:
            log_error(e, context="cache_cleanup")
            return report

        live: list[tuple[str, CacheEntry]] = []
        for key, entry in entries:
            if entry.is_expired(now):
                if self._store.delete(key):
                    report.expired_removed += 1
            else:
                live.append((key, entry))

        for key in invalid:
            if self._store.delete(key):
                report.invalid_removed += 1

        survivors = self._evict_low_value(live, now, report)
        report.remaining = len(survivors)

        self._store.record_cleanup(now)
        logger.info(
            "Cache cleanup completed",
            expired=report.expired_removed,
            invalid=report.invalid_removed,
            evicted=report.evicted,
            remaining=report.remaining,
        )
        return report

    def _evict_low_value(
        self, live: list[tuple[str, CacheEntry]], now: int, report: CleanupReport
    ) -> list[tuple[str, CacheEntry]]:
        """Evict lowest-scoring entries down to the low-water marks."""
        ranked = sorted(live, key=lambda item: retention_score(item[1], now))
        target_count = self._settings.low_water_entries
        target_size = self._settings.low_water_size_bytes

        if len(ranked) > target_count:
            excess = len(ranked) - target_count
            ranked = self._remove_first(ranked, excess, report)

        total_size = sum(entry.size for _, entry in ranked)
        while ranked and total_size > target_size:
            total_size -= ranked[0][1].size
            ranked = self._remove_first(ranked, 1, report)

        return ranked

    def _remove_first(
        self, ranked: list[tuple[str, CacheEntry]], count: int, report: CleanupReport
    ) -> list[tuple[str, CacheEntry]]:
        """Delete the first count entries and return the rest."""
        for key, _ in ranked[:count]:
            if self._store.delete(key):
                report.evicted += 1
        return ranked[count:]
