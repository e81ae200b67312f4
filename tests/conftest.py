"""
Pytest configuration and fixtures.

Provides common fixtures for testing.
"""

import pytest

from esg_cache.cache.esg_cache import ESGCache
from esg_cache.config import CacheSettings
from esg_cache.models.esg import ESGScores
from esg_cache.repositories.storage import MemoryStorage

START_MS = 1_700_000_000_000


class FakeClock:
    """Virtual millisecond clock."""

    def __init__(self, start: int = START_MS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_scores(symbol: str = "AAPL", base: float = 60.0) -> ESGScores:
    """Build a sample ESG score record."""
    return ESGScores(
        symbol=symbol,
        esg_score=base,
        environment_score=base + 5,
        social_score=base - 5,
        governance_score=base + 1,
    )


@pytest.fixture
def clock() -> FakeClock:
    """
    Virtual clock for testing.

    Returns:
        FakeClock starting at a fixed instant
    """
    return FakeClock()


@pytest.fixture
def test_settings() -> CacheSettings:
    """
    Create test configuration.

    Returns:
        Test configuration instance
    """
    return CacheSettings(prefetch_delay_seconds=0.0)


@pytest.fixture
def storage() -> MemoryStorage:
    """
    In-memory storage.

    Returns:
        MemoryStorage with the default quota
    """
    return MemoryStorage()


@pytest.fixture
def cache(storage, test_settings, clock) -> ESGCache:
    """
    Cache wired to memory storage and the virtual clock.

    Returns:
        ESGCache instance
    """
    return ESGCache(storage, settings=test_settings, clock=clock)


@pytest.fixture
def sample_scores() -> ESGScores:
    """
    Sample ESG scores for testing.

    Returns:
        ESGScores for AAPL
    """
    return make_scores("AAPL")
