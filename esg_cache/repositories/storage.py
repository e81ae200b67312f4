"""
Key-value storage adapters.

Sandi Metz Principles:
- Single Responsibility: Raw string storage access
- Small methods: Each operation isolated
- Dependency Injection: Redis client injected
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Optional

from redis import Redis
from redis.exceptions import RedisError

from esg_cache.config import CacheSettings
from esg_cache.exceptions import ConfigurationError, QuotaExceededError, StorageError
from esg_cache.utils.logger import get_logger

logger = get_logger(__name__)

PROBE_KEY = "__esg_cache_test__"


class StorageAdapter(ABC):
    """
    Synchronous string key-value store with enumerable keys.

    Mirrors the host storage primitive: get/set/remove plus
    length and key(index) enumeration.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Get stored value, None if absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store value under key.

        Raises:
            QuotaExceededError: If the write does not fit
            StorageError: If the backend fails
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key (no-op when absent)."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Get a snapshot of all keys in enumeration order."""

    @property
    def length(self) -> int:
        """Get number of stored keys."""
        return len(self.keys())

    def key(self, index: int) -> Optional[str]:
        """
        Get key at enumeration index.

        Args:
            index: Zero-based position

        Returns:
            Key, or None if index is out of range
        """
        keys = self.keys()
        if 0 <= index < len(keys):
            return keys[index]
        return None


class MemoryStorage(StorageAdapter):
    """
    In-process storage with a byte quota.

    Behaves like browser local storage: insertion-ordered keys and a
    hard capacity on the UTF-8 size of keys plus values.
    """

    def __init__(self, capacity_bytes: int = 5 * 1024 * 1024):
        """
        Initialize storage.

        Args:
            capacity_bytes: Host quota in bytes
        """
        self._capacity = capacity_bytes
        self._items: OrderedDict[str, str] = OrderedDict()
        self._used = 0

    @staticmethod
    def _cost(key: str, value: str) -> int:
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        previous = self._items.get(key)
        freed = self._cost(key, previous) if previous is not None else 0
        needed = self._used - freed + self._cost(key, value)

        if needed > self._capacity:
            raise QuotaExceededError(
                f"Storage quota exceeded ({needed} > {self._capacity} bytes)"
            )

        self._items[key] = value
        self._used = needed

    def remove_item(self, key: str) -> None:
        value = self._items.pop(key, None)
        if value is not None:
            self._used -= self._cost(key, value)

    def keys(self) -> list[str]:
        return list(self._items.keys())

    @property
    def used_bytes(self) -> int:
        """Get bytes currently used."""
        return self._used

    @property
    def capacity_bytes(self) -> int:
        """Get storage quota in bytes."""
        return self._capacity


class RedisStorage(StorageAdapter):
    """
    Storage backed by a synchronous Redis client.

    Enumeration is limited to keys starting with ``scope``.
    """

    def __init__(self, client: Redis, scope: str = ""):
        """
        Initialize storage.

        Args:
            client: Redis client (decode_responses=True)
            scope: Key prefix visible through keys()
        """
        self._client = client
        self._scope = scope

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._client.get(key)
        except RedisError as e:
            raise StorageError(f"Redis get failed: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self._client.set(key, value)
        except RedisError as e:
            if "OOM" in str(e):
                raise QuotaExceededError(f"Redis memory limit reached: {e}") from e
            raise StorageError(f"Redis set failed: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._client.delete(key)
        except RedisError as e:
            raise StorageError(f"Redis delete failed: {e}") from e

    def keys(self) -> list[str]:
        try:
            return sorted(self._client.scan_iter(match=f"{self._scope}*"))
        except RedisError as e:
            raise StorageError(f"Redis scan failed: {e}") from e


def probe_storage(storage: StorageAdapter) -> bool:
    """
    Check storage can round-trip a value.

    Args:
        storage: Storage to probe

    Returns:
        True if available, False otherwise
    """
    try:
        storage.set_item(PROBE_KEY, "test")
        storage.remove_item(PROBE_KEY)
        return True
    except StorageError as e:
        logger.warning("Storage probe failed", error=str(e))
        return False


def create_storage(settings: CacheSettings) -> StorageAdapter:
    """
    Build the configured storage backend.

    Args:
        settings: Cache settings

    Returns:
        Storage adapter

    Raises:
        ConfigurationError: If the backend is unknown
    """
    if settings.storage_backend == "memory":
        return MemoryStorage(capacity_bytes=settings.storage_capacity_bytes)

    if settings.storage_backend == "redis":
        client = Redis.from_url(settings.redis_url, decode_responses=True)
        return RedisStorage(client, scope=settings.key_prefix)

    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
