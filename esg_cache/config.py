"""
Cache configuration management.

Following Sandi Metz principles:
- Single Responsibility: Configuration loading and validation
- Small class: < 100 lines
- Clear naming: Descriptive property names
"""

import math
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class CacheSettings(BaseSettings):
    """
    Cache configuration with validation.

    Loads from ESG_CACHE_* environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ESG_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="ESGCache", description="Application name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Key layout
    key_prefix: str = Field(default="esg_cache_", min_length=1, description="Key prefix")
    metadata_key: str = Field(
        default="esg_cache_metadata", min_length=1, description="Metadata record key"
    )
    cache_version: str = Field(default="1.0", description="Metadata version")

    # Expiry settings
    esg_data_ttl_seconds: int = Field(default=86400, ge=1, description="ESG TTL")
    search_results_ttl_seconds: int = Field(default=1800, ge=1, description="Search TTL")

    # Capacity settings
    max_cache_size_bytes: int = Field(default=5 * MIB, ge=1, description="Max size")
    max_entries: int = Field(default=1000, ge=1, description="Max entries")
    low_water_ratio: float = Field(
        default=0.8, gt=0.0, le=1.0, description="Eviction target fraction"
    )
    cleanup_interval_seconds: float = Field(
        default=3600, gt=0, description="Background cleanup period"
    )

    # Rate limit settings
    rate_limit_window_seconds: int = Field(default=60, ge=1, description="Window")
    max_requests_per_window: int = Field(default=100, ge=1, description="Window limit")
    provider_cooldown_seconds: int = Field(
        default=60, ge=1, description="Back-off after provider 429"
    )
    max_provider_retries: int = Field(default=3, ge=1, description="Max cooldowns")
    prefetch_delay_seconds: float = Field(default=0.1, ge=0.0, description="Prefetch pause")

    # Storage settings
    storage_backend: Literal["memory", "redis"] = Field(
        default="memory", description="Storage backend"
    )
    storage_capacity_bytes: int = Field(
        default=5 * MIB, ge=1, description="Memory storage quota"
    )
    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, ge=1, le=65535, description="Redis port")
    redis_db: int = Field(default=0, ge=0, le=15, description="Redis database")
    redis_password: str = Field(default="", description="Redis password")

    @field_validator("metadata_key")
    @classmethod
    def validate_metadata_key(cls, v: str) -> str:
        """Validate metadata key is not blank."""
        if not v.strip():
            raise ValueError("metadata_key must not be blank")
        return v

    @property
    def esg_data_ttl_ms(self) -> int:
        """Get ESG data TTL in milliseconds."""
        return self.esg_data_ttl_seconds * 1000

    @property
    def search_results_ttl_ms(self) -> int:
        """Get search results TTL in milliseconds."""
        return self.search_results_ttl_seconds * 1000

    @property
    def rate_limit_window_ms(self) -> int:
        """Get rate limit window in milliseconds."""
        return self.rate_limit_window_seconds * 1000

    @property
    def provider_cooldown_ms(self) -> int:
        """Get provider cooldown in milliseconds."""
        return self.provider_cooldown_seconds * 1000

    @property
    def low_water_entries(self) -> int:
        """Get entry count eviction aims for."""
        return math.floor(self.max_entries * self.low_water_ratio)

    @property
    def low_water_size_bytes(self) -> int:
        """Get total size eviction aims for."""
        return math.floor(self.max_cache_size_bytes * self.low_water_ratio)

    @property
    def redis_url(self) -> str:
        """Build Redis URL."""
        if self.redis_password:
            return (
                f"redis://:{self.redis_password}@"
                f"{self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global configuration instance
settings = CacheSettings()
