"""Test statistics reporter."""

from esg_cache.cache.codec import JSON_CODEC
from esg_cache.cache.counters import CacheCounters
from esg_cache.cache.entry_store import EntryStore
from esg_cache.cache.statistics import StatisticsReporter
from esg_cache.exceptions import StorageError
from esg_cache.repositories.storage import MemoryStorage


class BrokenKeysStorage(MemoryStorage):
    """Storage whose enumeration fails."""

    def keys(self):
        raise StorageError("scan failed")


def build(storage, settings, clock):
    counters = CacheCounters()
    store = EntryStore(storage, settings, clock, counters)
    return store, StatisticsReporter(store, counters)


class TestStatisticsReporter:
    """Test statistics reporter."""

    def test_should_report_empty_store(self, storage, test_settings, clock):
        """Test statistics of empty store."""
        _, reporter = build(storage, test_settings, clock)

        stats = reporter.stats()

        assert stats.total_entries == 0
        assert stats.total_size == 0
        assert stats.oldest_entry is None

    def test_should_aggregate_entries(self, storage, test_settings, clock):
        """Test size and age aggregation."""
        store, reporter = build(storage, test_settings, clock)
        first = clock.now
        store.write("esg_cache_esg_A", store.build_entry({"blob": "x" * 189}, JSON_CODEC, 1000))
        clock.advance(10)
        store.write("esg_cache_esg_B", store.build_entry({"blob": "x" * 89}, JSON_CODEC, 1000))

        stats = reporter.stats()

        assert stats.total_entries == 2
        assert stats.total_size == 300
        assert stats.oldest_entry == first
        assert stats.newest_entry == first + 10

    def test_should_count_expired_entries_still_stored(self, storage, test_settings, clock):
        """Test expired-but-uncollected entries are included."""
        store, reporter = build(storage, test_settings, clock)
        store.write("esg_cache_esg_A", store.build_entry(1, JSON_CODEC, 10))
        clock.advance(100)

        assert reporter.stats().total_entries == 1

    def test_should_include_cumulative_rates(self, storage, test_settings, clock):
        """Test rates come from counters."""
        store, reporter = build(storage, test_settings, clock)
        store.counters.record_hit()
        store.counters.record_miss()

        stats = reporter.stats()
        metrics = reporter.performance_metrics()

        assert stats.hit_rate == 50.0
        assert metrics.hits == 1
        assert metrics.misses == 1
        assert metrics.total_requests == 2

    def test_should_return_empty_statistics_on_storage_failure(self, test_settings, clock):
        """Test scan failure fallback."""
        _, reporter = build(BrokenKeysStorage(), test_settings, clock)

        assert reporter.stats().total_entries == 0
