"""
ESG score fetch-through service.

Orchestrates cache lookups, request budgets and provider calls.

Sandi Metz Principles:
- Single Responsibility: Score retrieval orchestration
- Small methods: Each method < 10 lines where possible
- Dependency Injection: Cache, fetcher and cooldown injected
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

from esg_cache.cache.cooldown import ProviderCooldown
from esg_cache.cache.esg_cache import ESGCache
from esg_cache.exceptions import ProviderRateLimitError
from esg_cache.models.cache_entry import CacheNamespace
from esg_cache.models.esg import ESGScores
from esg_cache.utils.keys import normalize_identifier
from esg_cache.utils.logger import get_logger, log_error

logger = get_logger(__name__)

ScoreFetcher = Callable[[str], Awaitable[Optional[ESGScores]]]


@dataclass
class PrefetchReport:
    """Outcome of a prefetch run."""

    requested: int = 0
    cached: int = 0
    fetched: int = 0
    failed: int = 0
    stopped_early: bool = False


class ESGScoreService:
    """
    Serves ESG scores from cache, falling back to the provider.

    Order: cache -> shared in-flight fetch -> cooldown -> local budget
    -> provider. Every failure path returns None.
    """

    def __init__(
        self,
        cache: ESGCache,
        fetcher: ScoreFetcher,
        cooldown: Optional[ProviderCooldown] = None,
        endpoint: str = CacheNamespace.ESG.value,
    ):
        """
        Initialize service.

        Args:
            cache: ESG cache
            fetcher: Async provider call, returns None when no data exists
            cooldown: Provider cooldown tracker (built from cache settings if None)
            endpoint: Logical endpoint name for budgets and cooldowns
        """
        self._cache = cache
        self._fetcher = fetcher
        self._cooldown = cooldown or ProviderCooldown(
            cooldown_ms=cache.settings.provider_cooldown_ms,
            max_retries=cache.settings.max_provider_retries,
        )
        self._endpoint = endpoint
        self._inflight: dict[str, asyncio.Task] = {}
        self._deduplicated = 0

    @property
    def deduplicated(self) -> int:
        """Get number of lookups that joined an in-flight fetch."""
        return self._deduplicated

    async def get_scores(self, ticker: str) -> Optional[ESGScores]:
        """
        Get ESG scores for a ticker.

        Args:
            ticker: Ticker symbol (case-insensitive)

        Returns:
            Scores, or None if uncached and the provider is unavailable
        """
        symbol = normalize_identifier(ticker)
        if not symbol:
            return None

        cached = self._cache.get(symbol, CacheNamespace.ESG)
        if cached is not None:
            return cached

        pending = self._inflight.get(symbol)
        if pending is not None:
            self._deduplicated += 1
            return await asyncio.shield(pending)

        if not self._admit(symbol):
            return None

        return await self._start_fetch(symbol)

    def _admit(self, symbol: str) -> bool:
        """Check provider cooldown, then consume local budget."""
        if self._cooldown.is_rate_limited(self._endpoint):
            self._cooldown.set_fallback_active(self._endpoint, True)
            logger.info("Provider cooling down, skipping fetch", ticker=symbol)
            return False

        if not self._cache.can_make_request(self._endpoint):
            logger.warning("Local rate limit reached, skipping fetch", ticker=symbol)
            return False

        return True

    async def _start_fetch(self, symbol: str) -> Optional[ESGScores]:
        """Run one provider fetch that concurrent lookups can join."""
        task = asyncio.ensure_future(self._fetch_and_store(symbol))
        self._inflight[symbol] = task
        try:
            return await task
        finally:
            self._inflight.pop(symbol, None)

    async def _fetch_and_store(self, symbol: str) -> Optional[ESGScores]:
        """Call the provider and cache a successful result."""
        try:
            scores = await self._fetcher(symbol)
        except ProviderRateLimitError as e:
            retry_after_ms = (
                int(e.retry_after_seconds * 1000) if e.retry_after_seconds is not None else None
            )
            self._cooldown.mark_rate_limited(self._endpoint, retry_after_ms)
            self._cooldown.set_fallback_active(self._endpoint, True)
            return None
        except Exception as e:
            log_error(e, context="provider_fetch", ticker=symbol)
            return None

        if scores is None:
            logger.info("No ESG data found", ticker=symbol)
            return None

        self._cooldown.clear(self._endpoint)
        self._cache.set(symbol, scores, CacheNamespace.ESG)
        logger.info("Fetched and cached ESG data", ticker=symbol)
        return scores

    async def prefetch(self, tickers: Iterable[str]) -> PrefetchReport:
        """
        Warm the cache for several tickers.

        Stops at the first ticker the cooldown or local budget denies.

        Args:
            tickers: Ticker symbols

        Returns:
            Prefetch report
        """
        symbols = [normalize_identifier(t) for t in tickers if t.strip()]
        report = PrefetchReport(requested=len(symbols))
        delay = self._cache.settings.prefetch_delay_seconds
        logger.info("Prefetching ESG data", count=len(symbols))

        for index, symbol in enumerate(symbols):
            if self._cache.get(symbol, CacheNamespace.ESG) is not None:
                report.cached += 1
                continue

            if not self._admit(symbol):
                report.stopped_early = True
                logger.warning("Rate limit reached during prefetch, stopping", ticker=symbol)
                break

            if await self._start_fetch(symbol) is not None:
                report.fetched += 1
            else:
                report.failed += 1

            if delay and index < len(symbols) - 1:
                await asyncio.sleep(delay)

        logger.info(
            "Prefetch completed",
            cached=report.cached,
            fetched=report.fetched,
            failed=report.failed,
            stopped_early=report.stopped_early,
        )
        return report

    def force_retry(self) -> None:
        """Drop provider cooldown so the next lookup may fetch."""
        self._cooldown.clear(self._endpoint)
        logger.info("Forcing provider retry", endpoint=self._endpoint)

    def api_status(self) -> dict[str, Any]:
        """
        Get provider and budget status.

        Returns:
            Cooldown state plus local requests remaining
        """
        status = self._cooldown.status(self._endpoint)
        status["requests_remaining"] = self._cache.rate_limit_status(
            self._endpoint
        ).requests_remaining
        return status
