"""
Cache key generation utilities.

Sandi Metz Principles:
- Single Responsibility: Key derivation
- Small functions: Each does one thing
- Pure functions: No side effects
"""


def normalize_identifier(identifier: str) -> str:
    """
    Normalize identifier for lookups.

    Args:
        identifier: Ticker or search term

    Returns:
        Normalized identifier (trimmed, uppercase)
    """
    return identifier.strip().upper()


def generate_cache_key(prefix: str, namespace: str, identifier: str) -> str:
    """
    Generate physical storage key.

    Args:
        prefix: Store-wide key prefix (e.g. "esg_cache_")
        namespace: Logical data kind (e.g. "esg")
        identifier: Ticker or search term

    Returns:
        Cache key (prefix + namespace_IDENTIFIER)
    """
    return f"{prefix}{namespace}_{normalize_identifier(identifier)}"


def is_cache_key(key: str, prefix: str, metadata_key: str) -> bool:
    """
    Check whether a physical key holds a cache entry.

    Args:
        key: Physical storage key
        prefix: Store-wide key prefix
        metadata_key: Key of the metadata record

    Returns:
        True for entry keys, False for foreign keys and metadata
    """
    return key.startswith(prefix) and key != metadata_key
