"""Store backends."""

from kvmapper.storage.local import LocalStore
from kvmapper.storage.protocol import Store
from kvmapper.storage.redis_store import RedisStore

__all__ = [
    "Store",
    "LocalStore",
    "RedisStore",
]
