"""Test cache entry models."""

import pytest
from pydantic import ValidationError

from esg_cache.models.cache_entry import (
    CacheEntry,
    CacheMetadata,
    CacheNamespace,
    CacheWriteResult,
)


class TestCacheEntry:
    """Test cache entry model."""

    def test_should_create_fresh_entry(self):
        """Test factory sets lifecycle fields."""
        entry = CacheEntry.create(data={"a": 1}, size=7, ttl_ms=1000, now=5000)

        assert entry.timestamp == 5000
        assert entry.expiry == 6000
        assert entry.access_count == 1
        assert entry.last_accessed == 5000
        assert entry.size == 7

    def test_should_reject_non_positive_ttl(self):
        """Test expiry must follow timestamp."""
        with pytest.raises(ValidationError):
            CacheEntry.create(data=1, size=1, ttl_ms=0, now=5000)

    def test_should_reject_access_before_creation(self):
        """Test lastAccessed cannot precede timestamp."""
        with pytest.raises(ValidationError):
            CacheEntry(data=1, timestamp=10, expiry=20, last_accessed=5, size=1)

    def test_should_reject_zero_access_count(self):
        """Test access count lower bound."""
        with pytest.raises(ValidationError):
            CacheEntry(data=1, timestamp=10, expiry=20, access_count=0, last_accessed=10, size=1)

    def test_should_detect_expiry_at_boundary(self):
        """Test entry is expired at exactly its expiry."""
        entry = CacheEntry.create(data=1, size=1, ttl_ms=100, now=0)

        assert entry.is_expired(99) is False
        assert entry.is_expired(100) is True

    def test_should_record_access(self):
        """Test hit bookkeeping."""
        entry = CacheEntry.create(data=1, size=1, ttl_ms=100, now=0)

        entry.record_access(50)

        assert entry.access_count == 2
        assert entry.last_accessed == 50
        assert entry.idle_ms(80) == 30
        assert entry.age_ms(80) == 80

    def test_should_encode_with_camel_case_keys(self):
        """Test record layout."""
        entry = CacheEntry.create(data={"x": 1}, size=7, ttl_ms=100, now=0)
        record = entry.to_record()

        assert '"accessCount":1' in record
        assert '"lastAccessed":0' in record

    def test_should_decode_record(self):
        """Test record decoding preserves fields."""
        entry = CacheEntry.create(data={"x": [1, 2]}, size=11, ttl_ms=100, now=0)

        decoded = CacheEntry.from_record(entry.to_record())

        assert decoded == entry

    def test_should_fail_on_invalid_record(self):
        """Test invalid JSON is rejected."""
        with pytest.raises(ValidationError):
            CacheEntry.from_record("{not json")


class TestCacheMetadata:
    """Test metadata model."""

    def test_should_create_initial_metadata(self):
        """Test initial metadata."""
        metadata = CacheMetadata.initial("1.0", now=123)

        assert metadata.version == "1.0"
        assert metadata.created == 123
        assert metadata.last_cleanup == 123
        assert '"lastCleanup":123' in metadata.to_record()


class TestEnums:
    """Test cache enums."""

    def test_should_expose_namespace_values(self):
        """Test namespace values."""
        assert CacheNamespace.ESG.value == "esg"
        assert CacheNamespace.SEARCH.value == "search"

    def test_should_report_write_result(self):
        """Test write result helper."""
        assert CacheWriteResult.STORED.is_stored is True
        assert CacheWriteResult.REJECTED.is_stored is False
