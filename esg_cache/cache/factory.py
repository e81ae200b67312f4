"""
Cache factory.

Builds a fully wired cache from settings.
"""

from typing import Optional

from esg_cache.cache.esg_cache import ESGCache
from esg_cache.config import CacheSettings, settings as default_settings
from esg_cache.repositories.storage import StorageAdapter, create_storage
from esg_cache.utils.clock import Clock
from esg_cache.utils.logger import setup_logging


def create_cache(
    settings: Optional[CacheSettings] = None,
    storage: Optional[StorageAdapter] = None,
    clock: Optional[Clock] = None,
) -> ESGCache:
    """
    Create an ESG cache.

    Construct once at startup and pass the instance to callers; close it
    at shutdown to stop background cleanup.

    Args:
        settings: Cache settings (module defaults if None)
        storage: Storage adapter (built from settings if None)
        clock: Millisecond clock

    Returns:
        ESGCache instance

    Raises:
        ConfigurationError: If the storage backend is unknown
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, app_name=settings.app_name)
    storage = storage or create_storage(settings)
    return ESGCache(storage, settings=settings, clock=clock)
