"""Entity mapper: persists and fetches entities through a Store.

Usage:
    @entity(storage=StorageKind.FIELD_MAP)
    @dataclass
    class Counter:
        value: int

    @entity(storage=StorageKind.LIST)
    @dataclass
    class Event:
        name: str

    mapper = EntityMapper(LocalStore())
    mapper.persist(Counter(5))
    mapper.fetch(Counter)             # Counter(value=5)

    for name in "abc":
        mapper.persist(Event(name))
    mapper.fetch(Event, 2)            # [Event(name='b'), Event(name='c')]

Gotchas:
    FIELD_MAP writes and reads go field by field, one store call each, with
    no locking. Concurrent writers to the same type can leave a mix of old
    and new field values behind.

    fetch never returns a half-built or default-valued entity. Anything that
    prevents a full answer (undeclared type, missing field, store failure,
    undecodable data) yields NO_RESULT instead.
"""

from __future__ import annotations

from typing import Any, TypeVar

from kvmapper.core.codec import decode_entity, decode_field, encode_entity, encode_field
from kvmapper.core.entity import (
    NO_RESULT,
    EntityRegistry,
    EntityTypeMeta,
    NoResult,
    StorageKind,
    allocate,
    field_values,
    get_registry,
)
from kvmapper.core.errors import (
    CodecError,
    StoreError,
    UndeclaredStorageKindError,
    UnknownStorageKindError,
)
from kvmapper.core.keys import build_key
from kvmapper.core.resolver import StorageKindResolver
from kvmapper.logging_config import get_logger
from kvmapper.storage.protocol import Store

T = TypeVar("T")

logger = get_logger(__name__)


class EntityMapper:
    """Stateless orchestrator mapping entities onto a key-value store.

    Args:
        store: Backend holding all data.
        resolver: Storage kind resolver (default: reads the registry).
        registry: Entity registry for field lists and nested record types
            (default: global registry).
    """

    def __init__(
        self,
        store: Store,
        resolver: StorageKindResolver | None = None,
        registry: EntityRegistry | None = None,
    ) -> None:
        self._store = store
        self._registry = registry or get_registry()
        self._resolver = resolver or StorageKindResolver(self._registry)

    @property
    def store(self) -> Store:
        """Get the underlying store."""
        return self._store

    def persist(self, obj: Any) -> None:
        """Store an entity according to its declared storage kind.

        FIELD_MAP types write every declared field into the type's map.
        LIST types append the whole encoded entity to the type's list.

        Args:
            obj: Entity instance to store.

        Raises:
            UndeclaredStorageKindError: If the type declares no storage kind.
            UnknownStorageKindError: If the declared kind is not recognised.
            CodecError: If a field value cannot be encoded. Nothing is written.
            StoreError: If a store operation fails. Earlier FIELD_MAP field
                writes are not rolled back.
        """
        cls = type(obj)
        kind = self._resolver.resolve(cls)
        if kind is None:
            raise UndeclaredStorageKindError(
                f"{cls.__name__} declares no storage kind. "
                f"Did you forget @entity(storage=...)?"
            )
        meta = self._registry.describe(cls)
        key = build_key(kind, meta.type_name)

        if kind is StorageKind.FIELD_MAP:
            # Encode everything first so an unencodable field writes nothing
            encoded = {
                name: encode_field(value, self._registry)
                for name, value in field_values(obj, meta).items()
            }
            for name, value in encoded.items():
                self._store.set_field(key, name, value)
        elif kind is StorageKind.LIST:
            self._store.append_to_list(key, encode_entity(obj, self._registry))
        else:
            raise UnknownStorageKindError(f"Unknown storage kind: {kind!r}")

        logger.debug("entity.persisted", key=key, kind=kind.name)

    def fetch(self, cls: type[T], count: int = 1) -> T | list[T] | NoResult:
        """Load entities of a type from the store.

        Args:
            cls: Entity type to load.
            count: For LIST types, how many of the most recently appended
                entities to return. Ignored for FIELD_MAP types.

        Returns:
            FIELD_MAP: one fresh instance of cls.
            LIST: up to count fresh instances, oldest first.
            NO_RESULT: if the type is undeclared or the data cannot be read
                completely.

        Raises:
            TypeError: If count is not an int.
            ValueError: If count is negative.
            UnknownStorageKindError: If the declared kind is not recognised.
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError(f"count must be an int, got {type(count).__name__}")
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        kind = self._resolver.resolve(cls)
        if kind is None:
            logger.debug("fetch.no_result", type_name=cls.__qualname__, reason="undeclared")
            return NO_RESULT
        meta = self._registry.describe(cls)
        key = build_key(kind, meta.type_name)

        if kind is StorageKind.FIELD_MAP:
            return self._fetch_field_map(cls, meta, key)
        elif kind is StorageKind.LIST:
            return self._fetch_list(cls, key, count)
        else:
            raise UnknownStorageKindError(f"Unknown storage kind: {kind!r}")

    def _fetch_field_map(self, cls: type[T], meta: EntityTypeMeta, key: str) -> T | NoResult:
        """Read every declared field and build one instance, or NO_RESULT."""
        values: dict[str, Any] = {}
        try:
            for name in meta.fields:
                encoded = self._store.get_field(key, name)
                if encoded is None:
                    logger.debug("fetch.no_result", key=key, reason="missing_field", field=name)
                    return NO_RESULT
                values[name] = decode_field(encoded, self._registry)
        except (StoreError, CodecError) as e:
            logger.warning("fetch.no_result", key=key, reason=type(e).__name__, error=str(e))
            return NO_RESULT

        logger.debug("entity.fetched", key=key, count=1)
        return allocate(cls, meta, values)  # type: ignore[no-any-return]

    def _fetch_list(self, cls: type[T], key: str, count: int) -> list[T] | NoResult:
        """Read and decode the last count list entries, or NO_RESULT."""
        if count == 0:
            return []
        try:
            items = self._store.range_from_end(key, count)
            result = [decode_entity(item, cls, self._registry) for item in items]
        except (StoreError, CodecError) as e:
            logger.warning("fetch.no_result", key=key, reason=type(e).__name__, error=str(e))
            return NO_RESULT

        logger.debug("entity.fetched", key=key, count=len(result))
        return result
