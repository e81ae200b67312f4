"""
ESG cache facade.

Sandi Metz Principles:
- Single Responsibility: Cache operations orchestration
- Small methods: Each operation < 10 lines where possible
- Dependency Injection: Storage, settings and clock injected

No public method raises: every failure maps to a safe fallback value
(None, REJECTED, empty statistics) so the cache only ever changes
latency, never correctness.
"""

from typing import Any, Mapping, Optional, Union

from esg_cache.cache.codec import JSON_CODEC, PayloadCodec
from esg_cache.cache.counters import CacheCounters
from esg_cache.cache.entry_store import EntryStore
from esg_cache.cache.eviction import CleanupReport, EvictionPolicy
from esg_cache.cache.rate_limiter import SlidingWindowRateLimiter
from esg_cache.cache.scheduler import CleanupScheduler
from esg_cache.cache.statistics import StatisticsReporter
from esg_cache.config import CacheSettings, settings as default_settings
from esg_cache.exceptions import SerializationError, StorageError
from esg_cache.models.cache_entry import CacheNamespace, CacheWriteResult
from esg_cache.models.esg import ESGScores
from esg_cache.models.ratelimit import RateLimitStatus
from esg_cache.models.statistics import CacheStatistics, PerformanceMetrics
from esg_cache.repositories.storage import StorageAdapter, probe_storage
from esg_cache.utils.clock import Clock, now_ms
from esg_cache.utils.logger import get_logger, log_cache_store, log_error

logger = get_logger(__name__)

Namespace = Union[CacheNamespace, str]


def _namespace_value(namespace: Namespace) -> str:
    """Get the string form of a namespace."""
    if isinstance(namespace, CacheNamespace):
        return namespace.value
    return namespace


class ESGCache:
    """
    Caching and request governance for the ESG score provider.

    Sole entry point for callers: get, set, clear, stats and
    "may I call the network now".
    """

    def __init__(
        self,
        storage: StorageAdapter,
        settings: Optional[CacheSettings] = None,
        clock: Optional[Clock] = None,
        codecs: Optional[Mapping[str, PayloadCodec[Any]]] = None,
    ):
        """
        Initialize cache and probe storage.

        Args:
            storage: Key-value storage
            settings: Cache settings (module defaults if None)
            clock: Millisecond clock (wall clock if None)
            codecs: Extra payload codecs by namespace
        """
        self._settings = settings or default_settings
        self._clock = clock or now_ms
        self._counters = CacheCounters()
        self._store = EntryStore(storage, self._settings, self._clock, self._counters)
        self._reporter = StatisticsReporter(self._store, self._counters)
        self._eviction = EvictionPolicy(
            self._store, self._reporter, self._settings, self._clock
        )
        self._rate_limiter = SlidingWindowRateLimiter(
            max_requests=self._settings.max_requests_per_window,
            window_ms=self._settings.rate_limit_window_ms,
            clock=self._clock,
        )
        self._codecs: dict[str, PayloadCodec[Any]] = {
            CacheNamespace.ESG.value: PayloadCodec(ESGScores),
            CacheNamespace.SEARCH.value: PayloadCodec(list[ESGScores]),
        }
        self._codecs.update({_namespace_value(k): v for k, v in (codecs or {}).items()})
        self._default_ttls = {
            CacheNamespace.ESG.value: self._settings.esg_data_ttl_ms,
            CacheNamespace.SEARCH.value: self._settings.search_results_ttl_ms,
        }
        self._scheduler = CleanupScheduler(
            self.cleanup, self._settings.cleanup_interval_seconds
        )
        self._enabled = self._initialize(storage)

    def _initialize(self, storage: StorageAdapter) -> bool:
        """Probe storage, write metadata and run an initial cleanup."""
        if not probe_storage(storage):
            logger.warning("Storage not available, cache disabled")
            return False

        self._store.ensure_metadata()
        self._eviction.cleanup()
        logger.info("ESG cache initialized", prefix=self._settings.key_prefix)
        return True

    @property
    def is_enabled(self) -> bool:
        """Check if storage is usable."""
        return self._enabled

    @property
    def settings(self) -> CacheSettings:
        """Get cache settings."""
        return self._settings

    def _codec_for(self, namespace: str, codec: Optional[PayloadCodec[Any]]) -> PayloadCodec[Any]:
        if codec is not None:
            return codec
        return self._codecs.get(namespace, JSON_CODEC)

    def get(
        self,
        identifier: str,
        namespace: Namespace = CacheNamespace.ESG,
        codec: Optional[PayloadCodec[Any]] = None,
    ) -> Optional[Any]:
        """
        Get cached payload.

        Args:
            identifier: Ticker or search term (case-insensitive)
            namespace: Logical data kind
            codec: Payload codec (namespace default if None)

        Returns:
            Payload if a live entry exists, None otherwise
        """
        if not self._enabled:
            return None

        ns = _namespace_value(namespace)
        return self._store.get(ns, identifier, self._codec_for(ns, codec))

    def set(
        self,
        identifier: str,
        data: Any,
        namespace: Namespace = CacheNamespace.ESG,
        ttl_ms: Optional[int] = None,
        codec: Optional[PayloadCodec[Any]] = None,
    ) -> CacheWriteResult:
        """
        Store payload.

        Args:
            identifier: Ticker or search term (case-insensitive)
            data: Payload
            namespace: Logical data kind
            ttl_ms: Time-to-live in ms (namespace default if None)
            codec: Payload codec (namespace default if None)

        Returns:
            STORED, or REJECTED when skipped for any reason
        """
        if not self._enabled:
            return CacheWriteResult.REJECTED

        ns = _namespace_value(namespace)
        key = self._store.key_for(ns, identifier)
        ttl = ttl_ms if ttl_ms is not None else self._default_ttls.get(
            ns, self._settings.esg_data_ttl_ms
        )

        try:
            entry = self._store.build_entry(data, self._codec_for(ns, codec), ttl)
        except (SerializationError, ValueError) as e:
            log_error(e, context="cache_set", key=key, ttl_ms=ttl)
            return CacheWriteResult.REJECTED

        if not self._eviction.should_cache(entry):
            log_cache_store(key, entry.size, stored=False, reason="limits")
            return CacheWriteResult.REJECTED

        stored = self._store.write(key, entry)
        log_cache_store(key, entry.size, stored=stored)
        return CacheWriteResult.STORED if stored else CacheWriteResult.REJECTED

    def delete(self, identifier: str, namespace: Namespace = CacheNamespace.ESG) -> bool:
        """
        Remove one entry.

        Returns:
            True if the record is gone, False if disabled or storage failed
        """
        if not self._enabled:
            return False
        return self._store.delete(self._store.key_for(_namespace_value(namespace), identifier))

    def clear(self) -> int:
        """
        Remove every entry under the key prefix and reset counters.

        Returns:
            Number of entries removed
        """
        self._counters.reset()
        if not self._enabled:
            return 0

        try:
            removed = self._store.clear()
        except StorageError as e:
            log_error(e, context="cache_clear")
            removed = 0

        self._store.ensure_metadata()
        logger.info("Cache cleared", count=removed)
        return removed

    def stats(self) -> CacheStatistics:
        """Get store statistics (full scan)."""
        if not self._enabled:
            return CacheStatistics.empty(self._counters.snapshot())
        return self._reporter.stats()

    def performance_metrics(self) -> PerformanceMetrics:
        """Get cumulative hit/miss metrics."""
        return self._reporter.performance_metrics()

    def can_make_request(self, endpoint: str = CacheNamespace.ESG.value) -> bool:
        """
        Check and consume the local request budget for an endpoint.

        Args:
            endpoint: Logical endpoint name

        Returns:
            True if the caller may call the network now
        """
        if not self._enabled:
            return True
        return self._rate_limiter.try_acquire(endpoint)

    def rate_limit_status(self, endpoint: str = CacheNamespace.ESG.value) -> RateLimitStatus:
        """Get local request budget state for an endpoint."""
        return self._rate_limiter.status(endpoint)

    def cleanup(self) -> CleanupReport:
        """Run one cleanup pass."""
        if not self._enabled:
            return CleanupReport()
        return self._eviction.cleanup()

    def last_cleanup(self) -> Optional[int]:
        """Get time of the last cleanup pass (epoch ms)."""
        if not self._enabled:
            return None
        metadata = self._store.read_metadata()
        return metadata.last_cleanup if metadata else None

    def start_background_cleanup(self) -> None:
        """
        Start periodic cleanup on the running event loop.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self._enabled:
            self._scheduler.start()

    @property
    def background_cleanup_running(self) -> bool:
        """Check if periodic cleanup is active."""
        return self._scheduler.is_running

    async def close(self) -> None:
        """Stop periodic cleanup."""
        await self._scheduler.stop()

    async def __aenter__(self) -> "ESGCache":
        self.start_background_cleanup()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
