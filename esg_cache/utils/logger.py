"""
Structured logging configuration.

Following Sandi Metz principles:
- Single Responsibility: Logging setup and configuration
- Small functions: Each setup step isolated
- Clear naming: Descriptive function names
"""

import logging
import sys
from typing import Any, Optional

import structlog


def setup_logging(log_level: str = "INFO", app_name: Optional[str] = None) -> None:
    """
    Configure structured logging for the cache.

    Unknown level names fall back to INFO. When app_name is given it is
    bound into the context of every event as ``app``.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        app_name: Application name from settings
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if app_name:
        structlog.contextvars.bind_contextvars(app=app_name)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def log_cache_hit(key: str, namespace: str, **kwargs: Any) -> None:
    """
    Log cache hit.

    Args:
        key: Physical cache key
        namespace: Logical data kind (esg/search)
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.debug("cache_hit", key=key, namespace=namespace, **kwargs)


def log_cache_miss(key: str, reason: str = "absent", **kwargs: Any) -> None:
    """
    Log cache miss.

    Args:
        key: Physical cache key
        reason: Why the lookup missed (absent/expired/invalid)
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.debug("cache_miss", key=key, reason=reason, **kwargs)


def log_cache_store(key: str, size: int, stored: bool, **kwargs: Any) -> None:
    """
    Log cache write outcome.

    Args:
        key: Physical cache key
        size: Payload size in bytes
        stored: Whether the entry was written
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    if stored:
        logger.debug("cache_stored", key=key, size=size, **kwargs)
    else:
        logger.warning("cache_store_skipped", key=key, size=size, **kwargs)


def log_rate_limited(endpoint: str, **kwargs: Any) -> None:
    """
    Log a denied request.

    Args:
        endpoint: Logical endpoint name
        **kwargs: Additional context
    """
    logger = get_logger("ratelimit")
    logger.warning("rate_limit_exceeded", endpoint=endpoint, **kwargs)


def log_error(error: Exception, context: str, **kwargs: Any) -> None:
    """
    Log error with context.

    Args:
        error: Exception that occurred
        context: Error context
        **kwargs: Additional context
    """
    logger = get_logger("error")
    logger.error(
        "error_occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context,
        **kwargs
    )
