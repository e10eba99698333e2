"""Redis adapter implementing the Store protocol.

Field maps are Redis hashes (HSET/HGET) and lists are Redis lists
(RPUSH/LRANGE). The client must be created with decode_responses=True so
reads come back as str.

Usage:
    from kvmapper.storage.redis_store import RedisStore

    # From environment / .env (KVMAPPER_REDIS_*)
    store = RedisStore.from_settings(StoreSettings())

    # From a URL
    store = RedisStore.from_url("redis://localhost:6379/0")

    mapper = EntityMapper(store)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from kvmapper.core.errors import StoreError

if TYPE_CHECKING:
    import redis

    from kvmapper.config import StoreSettings


def _import_redis() -> Any:
    try:
        import redis
    except ImportError as e:
        raise ImportError(
            "redis is required for RedisStore. Install with: pip install kvmapper[redis]"
        ) from e
    return redis


@contextmanager
def _store_errors(command: str, key: str) -> Iterator[None]:
    """Re-raise redis-py failures as StoreError."""
    redis = _import_redis()
    try:
        yield
    except redis.exceptions.RedisError as e:
        raise StoreError(f"{command} {key} failed: {e}") from e


class RedisStore:
    """Redis implementation of the Store protocol.

    Each method is one blocking Redis command; nothing is pipelined or retried.

    Attributes:
        client: The underlying redis-py client.
    """

    def __init__(self, client: redis.Redis) -> None:
        """Initialize store with a redis-py client.

        Use factory methods instead of direct construction.

        Args:
            client: Client created with decode_responses=True.
        """
        self._client = client

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> RedisStore:
        """Create store from connection settings.

        Args:
            settings: Connection settings; settings.url wins over host/port.

        Returns:
            Configured RedisStore instance.
        """
        if settings.url:
            return cls.from_url(settings.url, socket_timeout=settings.socket_timeout)

        redis = _import_redis()
        client = redis.Redis(
            host=settings.host,
            port=settings.port,
            password=settings.password,
            db=settings.db,
            socket_timeout=settings.socket_timeout,
            decode_responses=True,
        )
        return cls(client)

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = None) -> RedisStore:
        """Create store from a redis:// URL.

        Args:
            url: Connection URL.
            socket_timeout: Per-command timeout in seconds.

        Returns:
            Configured RedisStore instance.
        """
        redis = _import_redis()
        client = redis.Redis.from_url(url, socket_timeout=socket_timeout, decode_responses=True)
        return cls(client)

    @property
    def client(self) -> redis.Redis:
        """Get the underlying redis-py client."""
        return self._client

    def set_field(self, key: str, field: str, value: str) -> None:
        with _store_errors("HSET", key):
            self._client.hset(key, field, value)

    def get_field(self, key: str, field: str) -> str | None:
        with _store_errors("HGET", key):
            return self._client.hget(key, field)  # type: ignore[no-any-return]

    def append_to_list(self, key: str, value: str) -> None:
        with _store_errors("RPUSH", key):
            self._client.rpush(key, value)

    def range_from_end(self, key: str, count: int) -> list[str]:
        """Return the last count items of the list at key, in append order.

        LRANGE key -0 -1 would return the whole list, so count <= 0 is
        answered locally without a round-trip.
        """
        if count <= 0:
            return []
        with _store_errors("LRANGE", key):
            return list(self._client.lrange(key, -count, -1))

    def close(self) -> None:
        """Close the underlying connection pool."""
        with _store_errors("CLOSE", "connection"):
            self._client.close()
