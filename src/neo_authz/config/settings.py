"""Settings for the authorization engine.

All options can be supplied through environment variables prefixed with
``NEO_AUTHZ_`` or through a ``.env`` file.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import CacheBackend, CacheTTL, LockDefaults


class AuthorizationSettings(BaseSettings):
    """Cache, lock and backend configuration consumed by the core."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_AUTHZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cache key scheme and lifetime
    cache_key_prefix: str = Field(default="neo_authz", description="Prefix for every cache and lock key")
    cache_ttl_seconds: Optional[int] = Field(
        default=CacheTTL.PERMISSIONS,
        ge=0,
        description="Lifetime of cached permission sets; None or 0 never expires",
    )

    # Recompute lock
    lock_wait_timeout_seconds: float = Field(
        default=LockDefaults.WAIT_TIMEOUT, gt=0, description="Maximum wait for the recompute lock"
    )
    # Must exceed the longest recompute or mutation; a holder outliving its
    # lease lets a second holder in
    lock_lease_seconds: int = Field(
        default=CacheTTL.LOCK_LEASE,
        ge=1,
        description="Lock expiry protecting against crashed holders; longer than any recompute or mutation",
    )
    lock_retry_interval_seconds: float = Field(
        default=LockDefaults.RETRY_INTERVAL, gt=0, description="Polling interval while waiting for a lock"
    )

    # Backend selection
    cache_backend: CacheBackend = Field(default=CacheBackend.MEMORY, description="Cache and lock backend")
    redis_url: Optional[str] = Field(default=None, description="Redis URL, required for the redis backend")

    @field_validator("cache_key_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Reject empty prefixes, a trailing key separator and glob characters."""
        if not v or not v.strip():
            raise ValueError("cache_key_prefix must not be empty")
        if v.endswith(":"):
            raise ValueError(f"cache_key_prefix must not end with ':', got: {v}")
        if any(char in v for char in "*?[]\\"):
            raise ValueError(f"cache_key_prefix must not contain glob characters, got: {v}")
        return v

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: Optional[str]) -> Optional[str]:
        """Require a redis scheme when a URL is configured."""
        if v is not None and not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError(f"Invalid redis_url: {v}. Expected redis://, rediss:// or unix://")
        return v

    @property
    def effective_ttl(self) -> Optional[int]:
        """TTL to hand to the cache, None meaning never expire."""
        return self.cache_ttl_seconds or None
