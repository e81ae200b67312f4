"""
Models package for ESG cache.

Exports all model classes for easy imports throughout the package.
"""

# Cache models
from esg_cache.models.cache_entry import (
    CacheEntry,
    CacheMetadata,
    CacheNamespace,
    CacheWriteResult,
)

# Payload models
from esg_cache.models.esg import ESGScores

# Rate limiting models
from esg_cache.models.ratelimit import RateLimitStatus, RateLimitWindow

# Statistics models
from esg_cache.models.statistics import CacheStatistics, PerformanceMetrics

__all__ = [
    # Cache
    "CacheEntry",
    "CacheMetadata",
    "CacheNamespace",
    "CacheWriteResult",
    # Payload
    "ESGScores",
    # Rate limiting
    "RateLimitStatus",
    "RateLimitWindow",
    # Statistics
    "CacheStatistics",
    "PerformanceMetrics",
]
