"""Configuration settings using Pydantic Settings.

Provides typed connection configuration for store backends with environment
variable support.

Usage:
    from kvmapper.config import StoreSettings

    # Load from environment variables (KVMAPPER_REDIS_*)
    settings = StoreSettings()

    # Or override with explicit values
    settings = StoreSettings(host="cache.internal", password="secret")
"""

from __future__ import annotations

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install pydantic-settings"
    ) from e


class StoreSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the Redis store backend.

    Attributes:
        url: Full connection URL (redis://...). Takes precedence when set.
        host: Server host name.
        port: Server port.
        password: Server password (prefer environment variable).
        db: Logical database index.
        socket_timeout: Per-command timeout in seconds (None blocks indefinitely).

    Environment Variables:
        KVMAPPER_REDIS_URL
        KVMAPPER_REDIS_HOST
        KVMAPPER_REDIS_PORT
        KVMAPPER_REDIS_PASSWORD
        KVMAPPER_REDIS_DB
        KVMAPPER_REDIS_SOCKET_TIMEOUT
    """

    model_config = SettingsConfigDict(
        env_prefix="KVMAPPER_REDIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str | None = None
    host: str = "localhost"
    port: int = 6379
    password: str | None = None
    db: int = 0
    socket_timeout: float | None = None
