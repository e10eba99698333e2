"""Store protocol for swappable key-value backends.

The mapper only needs two shapes from a backend: a map of named fields under
a key, and an append-only list under a key. Keys, field names and values are
plain strings.

Implementations:
- LocalStore: in-memory, single process (tests, prototyping)
- RedisStore: Redis hashes and lists via redis-py

Usage:
    store = LocalStore()
    mapper = EntityMapper(store)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Abstract key-value store interface. Implementations handle actual data.

    Every method is a single blocking call. Failures are reported by raising
    StoreError.
    """

    def set_field(self, key: str, field: str, value: str) -> None:
        """Write value into the map at key under field."""
        ...

    def get_field(self, key: str, field: str) -> str | None:
        """Read field from the map at key. Returns None if absent."""
        ...

    def append_to_list(self, key: str, value: str) -> None:
        """Append value to the end of the list at key."""
        ...

    def range_from_end(self, key: str, count: int) -> list[str]:
        """Return the last count items of the list at key, in append order.

        Returns fewer items if the list is shorter, and an empty list when
        count <= 0 or the key does not exist.
        """
        ...
