"""Test cache entry store."""

import pytest

from esg_cache.cache.codec import JSON_CODEC, PayloadCodec
from esg_cache.cache.entry_store import EntryStore
from esg_cache.exceptions import SerializationError, StorageError
from esg_cache.models.cache_entry import CacheEntry
from esg_cache.models.esg import ESGScores
from esg_cache.repositories.storage import MemoryStorage


class FailingReadStorage(MemoryStorage):
    """Storage whose reads always fail."""

    def get_item(self, key):
        raise StorageError("read failed")


@pytest.fixture
def store(storage, test_settings, clock) -> EntryStore:
    """Create entry store over memory storage."""
    return EntryStore(storage, test_settings, clock)


def put(store: EntryStore, identifier: str, data, ttl_ms: int = 1000) -> str:
    """Write a JSON payload and return its key."""
    key = store.key_for("esg", identifier)
    store.write(key, store.build_entry(data, JSON_CODEC, ttl_ms))
    return key


class TestEntryStore:
    """Test entry store."""

    def test_should_count_miss_for_absent_key(self, store):
        """Test absent lookup."""
        assert store.get("esg", "AAPL", JSON_CODEC) is None
        assert store.counters.misses == 1
        assert store.counters.total_requests == 1

    def test_should_return_live_entry_and_count_hit(self, store):
        """Test hit path."""
        put(store, "AAPL", {"v": 1})

        assert store.get("esg", "aapl", JSON_CODEC) == {"v": 1}
        assert store.counters.hits == 1

    def test_should_update_access_metadata_on_hit(self, store, clock):
        """Test hits persist usage metadata."""
        key = put(store, "AAPL", {"v": 1})
        clock.advance(500)

        store.get("esg", "AAPL", JSON_CODEC)

        entry = store.read_entry(key)
        assert entry.access_count == 2
        assert entry.last_accessed == clock.now

    def test_should_remove_expired_entry_on_read(self, store, storage, clock):
        """Test expired lookup deletes the record."""
        key = put(store, "AAPL", {"v": 1}, ttl_ms=1000)
        clock.advance(1000)

        assert store.get("esg", "AAPL", JSON_CODEC) is None
        assert storage.get_item(key) is None
        assert store.counters.misses == 1

    def test_should_treat_corrupt_record_as_miss(self, store, storage):
        """Test invalid JSON is a miss and stays for cleanup."""
        key = store.key_for("esg", "AAPL")
        storage.set_item(key, "{broken")

        assert store.get("esg", "AAPL", JSON_CODEC) is None
        assert store.counters.misses == 1
        assert storage.get_item(key) == "{broken"

    def test_should_treat_payload_type_mismatch_as_miss(self, store):
        """Test payload that fails codec validation."""
        put(store, "AAPL", {"unexpected": True})

        assert store.get("esg", "AAPL", PayloadCodec(ESGScores)) is None
        assert store.counters.misses == 1

    def test_should_remove_expired_record_with_mismatched_payload(self, store, storage, clock):
        """Test expiry is checked before payload decoding."""
        key = put(store, "AAPL", {"x": 1}, ttl_ms=1000)
        clock.advance(2 * 60 * 60 * 1000)

        assert store.get("esg", "AAPL", PayloadCodec(ESGScores)) is None
        assert storage.get_item(key) is None
        assert store.counters.misses == 1

    def test_should_treat_storage_failure_as_miss(self, test_settings, clock):
        """Test storage read errors are misses."""
        store = EntryStore(FailingReadStorage(), test_settings, clock)

        assert store.get("esg", "AAPL", JSON_CODEC) is None
        assert store.counters.misses == 1

    def test_should_build_entry_with_payload_size(self, store, clock):
        """Test entry construction."""
        entry = store.build_entry({"blob": "x" * 189}, JSON_CODEC, 5000)

        assert entry.size == 200
        assert entry.timestamp == clock.now
        assert entry.expiry == clock.now + 5000

    def test_should_return_false_when_quota_exceeded(self, test_settings, clock):
        """Test write failure is reported, not raised."""
        store = EntryStore(MemoryStorage(capacity_bytes=50), test_settings, clock)
        entry = store.build_entry({"blob": "x" * 100}, JSON_CODEC, 1000)

        assert store.write("esg_cache_esg_BIG", entry) is False

    def test_should_list_entry_keys_without_metadata(self, store, storage):
        """Test key enumeration filters foreign keys and metadata."""
        store.ensure_metadata()
        storage.set_item("unrelated", "x")
        key = put(store, "AAPL", 1)

        assert store.entry_keys() == [key]

    def test_should_scan_valid_and_invalid_records(self, store, storage):
        """Test scan partitions records."""
        good = put(store, "AAPL", 1)
        storage.set_item("esg_cache_esg_BAD", "nope")

        entries, invalid = store.scan()

        assert [key for key, _ in entries] == [good]
        assert invalid == ["esg_cache_esg_BAD"]

    def test_should_raise_serialization_error_on_raw_read(self, store, storage):
        """Test read_entry surfaces invalid records."""
        storage.set_item("esg_cache_esg_BAD", "nope")

        with pytest.raises(SerializationError):
            store.read_entry("esg_cache_esg_BAD")

    def test_should_clear_prefixed_keys(self, store, storage):
        """Test clear removes entries and metadata only."""
        store.ensure_metadata()
        storage.set_item("unrelated", "x")
        put(store, "AAPL", 1)
        put(store, "MSFT", 2)

        assert store.clear() == 2
        assert storage.keys() == ["unrelated"]

    def test_should_create_metadata_once(self, store, clock):
        """Test metadata initialization is idempotent."""
        first = store.ensure_metadata()
        clock.advance(1000)
        second = store.ensure_metadata()

        assert first.created == second.created

    def test_should_record_cleanup_time(self, store, clock):
        """Test lastCleanup update."""
        store.ensure_metadata()
        clock.advance(1000)

        store.record_cleanup(clock.now)

        assert store.read_metadata().last_cleanup == clock.now

    def test_should_ignore_unreadable_metadata(self, store, storage, test_settings):
        """Test corrupt metadata reads as absent."""
        storage.set_item(test_settings.metadata_key, "garbage")
        assert store.read_metadata() is None
