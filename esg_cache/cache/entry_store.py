"""
Cache entry store.

Sandi Metz Principles:
- Single Responsibility: Entry encoding and lifecycle on top of storage
- Small methods: Each operation isolated
- Dependency Injection: Storage, settings and clock injected
"""

from typing import Optional, TypeVar

from pydantic import ValidationError

from esg_cache.cache.codec import PayloadCodec
from esg_cache.cache.counters import CacheCounters
from esg_cache.config import CacheSettings
from esg_cache.exceptions import SerializationError, StorageError
from esg_cache.models.cache_entry import CacheEntry, CacheMetadata
from esg_cache.repositories.storage import StorageAdapter
from esg_cache.utils.clock import Clock
from esg_cache.utils.keys import generate_cache_key, is_cache_key
from esg_cache.utils.logger import get_logger, log_cache_hit, log_cache_miss, log_error

logger = get_logger(__name__)

T = TypeVar("T")


class EntryStore:
    """
    Stores cache entries as JSON records in a key-value storage.

    Read failures count as misses, write failures as skipped writes.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        settings: CacheSettings,
        clock: Clock,
        counters: Optional[CacheCounters] = None,
    ):
        """
        Initialize entry store.

        Args:
            storage: Key-value storage
            settings: Cache settings (key layout)
            clock: Millisecond clock
            counters: Hit/miss counters (creates new if None)
        """
        self._storage = storage
        self._settings = settings
        self._clock = clock
        self._counters = counters or CacheCounters()

    @property
    def counters(self) -> CacheCounters:
        """Get hit/miss counters."""
        return self._counters

    def key_for(self, namespace: str, identifier: str) -> str:
        """Get physical key for a namespaced identifier."""
        return generate_cache_key(self._settings.key_prefix, namespace, identifier)

    def get(self, namespace: str, identifier: str, codec: PayloadCodec[T]) -> Optional[T]:
        """
        Look up a live entry and register the access.

        Args:
            namespace: Logical data kind
            identifier: Case-insensitive identifier
            codec: Payload codec

        Returns:
            Decoded payload, None on miss
        """
        key = self.key_for(namespace, identifier)

        try:
            record = self._storage.get_item(key)
        except StorageError as e:
            log_error(e, context="cache_read", key=key)
            return self._miss(key, "storage_error")

        if record is None:
            return self._miss(key, "absent")

        try:
            entry = CacheEntry.from_record(record)
        except ValidationError as e:
            log_error(e, context="cache_decode", key=key)
            return self._miss(key, "invalid")

        now = self._clock()
        if entry.is_expired(now):
            self.delete(key)
            return self._miss(key, "expired")

        try:
            data = codec.decode(entry.data)
        except SerializationError as e:
            log_error(e, context="cache_decode", key=key)
            return self._miss(key, "invalid")

        entry.record_access(now)
        self._persist_access(key, entry)
        self._counters.record_hit()
        log_cache_hit(key, namespace, access_count=entry.access_count)
        return data

    def _miss(self, key: str, reason: str) -> None:
        """Count and log a miss."""
        self._counters.record_miss()
        log_cache_miss(key, reason=reason)
        return None

    def _persist_access(self, key: str, entry: CacheEntry) -> None:
        """Write back updated usage metadata."""
        try:
            self._storage.set_item(key, entry.to_record())
        except StorageError as e:
            log_error(e, context="cache_touch", key=key)

    def build_entry(self, data: T, codec: PayloadCodec[T], ttl_ms: int) -> CacheEntry:
        """
        Build a fresh entry for a payload.

        Args:
            data: Payload
            codec: Payload codec
            ttl_ms: Time-to-live in milliseconds

        Returns:
            New cache entry

        Raises:
            SerializationError: If the payload cannot be encoded
            ValueError: If ttl_ms is not positive
        """
        raw = codec.encode(data)
        size = codec.payload_size(raw)
        return CacheEntry.create(data=raw, size=size, ttl_ms=ttl_ms, now=self._clock())

    def write(self, key: str, entry: CacheEntry) -> bool:
        """
        Persist an entry.

        Args:
            key: Physical key
            entry: Entry to store

        Returns:
            True if stored, False on storage failure (quota included)
        """
        try:
            self._storage.set_item(key, entry.to_record())
            return True
        except StorageError as e:
            log_error(e, context="cache_write", key=key, size=entry.size)
            return False

    def delete(self, key: str) -> bool:
        """
        Remove a physical record.

        Returns:
            True if removed, False on storage failure
        """
        try:
            self._storage.remove_item(key)
            return True
        except StorageError as e:
            log_error(e, context="cache_delete", key=key)
            return False

    def entry_keys(self) -> list[str]:
        """
        Get all physical entry keys (metadata excluded).

        Raises:
            StorageError: If keys cannot be enumerated
        """
        return [
            key
            for key in self._storage.keys()
            if is_cache_key(key, self._settings.key_prefix, self._settings.metadata_key)
        ]

    def read_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Read a raw entry without touching usage metadata.

        Returns:
            Entry, None if absent

        Raises:
            SerializationError: If the record is not a valid entry
            StorageError: If the read fails
        """
        record = self._storage.get_item(key)
        if record is None:
            return None
        try:
            return CacheEntry.from_record(record)
        except ValidationError as e:
            raise SerializationError(f"Invalid cache record at {key}") from e

    def scan(self) -> tuple[list[tuple[str, CacheEntry]], list[str]]:
        """
        Read every physical entry.

        Returns:
            Tuple of ([(key, entry)], [undecodable keys])

        Raises:
            StorageError: If the storage cannot be read
        """
        entries: list[tuple[str, CacheEntry]] = []
        invalid: list[str] = []

        for key in self.entry_keys():
            try:
                entry = self.read_entry(key)
            except SerializationError:
                invalid.append(key)
                continue
            if entry is not None:
                entries.append((key, entry))

        return entries, invalid

    def clear(self) -> int:
        """
        Remove every key under the prefix, metadata included.

        Returns:
            Number of entries removed (metadata not counted)

        Raises:
            StorageError: If keys cannot be enumerated
        """
        removed = 0
        for key in self._storage.keys():
            if not key.startswith(self._settings.key_prefix):
                continue
            if self.delete(key) and key != self._settings.metadata_key:
                removed += 1
        return removed

    def read_metadata(self) -> Optional[CacheMetadata]:
        """
        Read store-wide metadata.

        Returns:
            Metadata, None if absent or unreadable
        """
        try:
            record = self._storage.get_item(self._settings.metadata_key)
            if record is None:
                return None
            return CacheMetadata.model_validate_json(record)
        except (StorageError, ValidationError) as e:
            log_error(e, context="metadata_read")
            return None

    def ensure_metadata(self) -> CacheMetadata:
        """Create metadata record if missing."""
        metadata = self.read_metadata()
        if metadata is None:
            metadata = CacheMetadata.initial(self._settings.cache_version, self._clock())
            self._write_metadata(metadata)
        return metadata

    def record_cleanup(self, now: int) -> None:
        """Store the time of the last cleanup pass."""
        metadata = self.read_metadata() or CacheMetadata.initial(
            self._settings.cache_version, now
        )
        metadata.last_cleanup = now
        self._write_metadata(metadata)

    def _write_metadata(self, metadata: CacheMetadata) -> None:
        try:
            self._storage.set_item(self._settings.metadata_key, metadata.to_record())
        except StorageError as e:
            log_error(e, context="metadata_write")
