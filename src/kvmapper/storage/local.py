"""Local in-memory store implementation.

Simple dict-based store suitable for single-process use and testing.
Each call holds a lock, so a single operation is atomic in the same way a
single Redis command is; sequences of calls are not.

Usage:
    store = LocalStore()
    mapper = EntityMapper(store)
"""

from __future__ import annotations

import threading

from kvmapper.core.errors import StoreError


class LocalStore:
    """In-memory store using nested dicts and lists.

    Structure:
        _maps[key][field] = value
        _lists[key] = [value, ...]

    A key holds either a map or a list, never both, mirroring Redis type rules.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._maps: dict[str, dict[str, str]] = {}
        self._lists: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def _check_type(self, key: str, expected: str) -> None:
        """Raise if key already holds the other data shape."""
        holder = self._lists if expected == "map" else self._maps
        if key in holder:
            raise StoreError(f"Key {key} holds a value of the wrong type (expected {expected})")

    def set_field(self, key: str, field: str, value: str) -> None:
        """Write value into the map at key under field.

        Args:
            key: Map key.
            field: Field name within the map.
            value: Encoded value.

        Raises:
            StoreError: If key holds a list.
        """
        with self._lock:
            self._check_type(key, "map")
            self._maps.setdefault(key, {})[field] = value

    def get_field(self, key: str, field: str) -> str | None:
        """Read field from the map at key.

        Args:
            key: Map key.
            field: Field name within the map.

        Returns:
            Stored value, or None if key or field is absent.

        Raises:
            StoreError: If key holds a list.
        """
        with self._lock:
            self._check_type(key, "map")
            return self._maps.get(key, {}).get(field)

    def append_to_list(self, key: str, value: str) -> None:
        """Append value to the end of the list at key.

        Raises:
            StoreError: If key holds a map.
        """
        with self._lock:
            self._check_type(key, "list")
            self._lists.setdefault(key, []).append(value)

    def range_from_end(self, key: str, count: int) -> list[str]:
        """Return the last count items of the list at key, in append order.

        Raises:
            StoreError: If key holds a map.
        """
        if count <= 0:
            return []
        with self._lock:
            self._check_type(key, "list")
            return list(self._lists.get(key, [])[-count:])

    def keys(self) -> list[str]:
        """List every key currently holding data."""
        with self._lock:
            return sorted([*self._maps, *self._lists])

    def clear(self) -> None:
        """Remove all data."""
        with self._lock:
            self._maps.clear()
            self._lists.clear()
