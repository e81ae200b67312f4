"""
Custom exceptions for the cache layer.
"""

from typing import Optional


class CacheError(Exception):
    """Base exception for cache errors."""

    pass


class StorageError(CacheError):
    """Raised when the storage backend fails."""

    pass


class StorageUnavailableError(StorageError):
    """Raised when the storage backend cannot be used at all."""

    pass


class QuotaExceededError(StorageError):
    """Raised when a write does not fit in the host storage quota."""

    pass


class SerializationError(CacheError):
    """Raised when a payload or entry cannot be encoded or decoded."""

    pass


class ConfigurationError(CacheError):
    """Raised when configuration is invalid."""

    pass


class ProviderError(CacheError):
    """Raised when the external score provider fails."""

    pass


class ProviderRateLimitError(ProviderError):
    """Raised when the score provider rejects a call with 429."""

    def __init__(
        self,
        message: str = "Provider rate limit exceeded",
        retry_after_seconds: Optional[float] = None,
    ):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds
