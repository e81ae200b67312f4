"""
Cache entry models.

Sandi Metz Principles:
- Single Responsibility: Cache data structure
- Clear naming: Descriptive fields
- Metadata mutated only through explicit methods
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CacheNamespace(str, Enum):
    """Logical data kinds sharing the physical store."""

    ESG = "esg"
    SEARCH = "search"


class CacheWriteResult(str, Enum):
    """Outcome of a cache write."""

    STORED = "stored"
    REJECTED = "rejected"

    @property
    def is_stored(self) -> bool:
        """Check if the entry was written."""
        return self is CacheWriteResult.STORED


class CacheEntry(BaseModel):
    """Cached payload with usage metadata (all times in epoch ms)."""

    model_config = ConfigDict(populate_by_name=True)

    data: Any = Field(..., description="Encoded payload")
    timestamp: int = Field(..., ge=0, description="Creation time")
    expiry: int = Field(..., ge=0, description="Absolute expiration time")
    access_count: int = Field(
        default=1, ge=1, alias="accessCount", description="Number of reads"
    )
    last_accessed: int = Field(
        ..., ge=0, alias="lastAccessed", description="Last read time"
    )
    size: int = Field(..., ge=0, description="Serialized payload size in bytes")

    @model_validator(mode="after")
    def validate_timeline(self) -> "CacheEntry":
        """Validate expiry and access times against creation time."""
        if self.expiry <= self.timestamp:
            raise ValueError(
                f"expiry ({self.expiry}) must be after timestamp ({self.timestamp})"
            )
        if self.last_accessed < self.timestamp:
            raise ValueError(
                f"lastAccessed ({self.last_accessed}) cannot precede "
                f"timestamp ({self.timestamp})"
            )
        return self

    @classmethod
    def create(cls, data: Any, size: int, ttl_ms: int, now: int) -> "CacheEntry":
        """
        Create a fresh entry.

        Args:
            data: Encoded payload
            size: Serialized payload size in bytes
            ttl_ms: Time-to-live in milliseconds (must be positive)
            now: Creation time

        Returns:
            CacheEntry with access_count 1

        Raises:
            ValueError: If ttl_ms is not positive (via model_validator)
        """
        return cls(
            data=data,
            timestamp=now,
            expiry=now + ttl_ms,
            access_count=1,
            last_accessed=now,
            size=size,
        )

    @classmethod
    def from_record(cls, record: str) -> "CacheEntry":
        """
        Decode a stored record.

        Raises:
            pydantic.ValidationError: If the record is not a valid entry
        """
        return cls.model_validate_json(record)

    def to_record(self) -> str:
        """Encode entry for storage."""
        return self.model_dump_json(by_alias=True)

    def is_expired(self, now: int) -> bool:
        """Check if entry is expired at given time."""
        return now >= self.expiry

    def record_access(self, now: int) -> None:
        """Register a cache hit."""
        self.access_count += 1
        self.last_accessed = max(now, self.timestamp)

    def age_ms(self, now: int) -> int:
        """Get entry age in milliseconds."""
        return max(0, now - self.timestamp)

    def idle_ms(self, now: int) -> int:
        """Get time since last access in milliseconds."""
        return max(0, now - self.last_accessed)


class CacheMetadata(BaseModel):
    """Store-wide metadata record."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(..., description="Cache layout version")
    created: int = Field(..., ge=0, description="Store creation time")
    last_cleanup: int = Field(..., ge=0, alias="lastCleanup", description="Last cleanup")

    @classmethod
    def initial(cls, version: str, now: int) -> "CacheMetadata":
        """Create metadata for a new store."""
        return cls(version=version, created=now, last_cleanup=now)

    def to_record(self) -> str:
        """Encode metadata for storage."""
        return self.model_dump_json(by_alias=True)
