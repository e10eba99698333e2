"""Configuration module using Pydantic Settings.

Provides typed configuration for store backends with environment variable support.

Usage:
    from kvmapper.config import StoreSettings

    settings = StoreSettings(host="localhost", port=6379)
"""

from kvmapper.config.settings import StoreSettings

__all__ = [
    "StoreSettings",
]
