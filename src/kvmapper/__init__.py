"""kvmapper: map plain data records onto key-value stores.

Usage:
    from kvmapper import EntityMapper, LocalStore, StorageKind, entity

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
    mapper.persist(Event("started"))

    counter = mapper.fetch(Counter)
    latest = mapper.fetch(Event, 10)
"""

__version__ = "0.1.0"

# Core primitives
from kvmapper.core import (
    NO_RESULT,
    AttributeMetadataProvider,
    CodecError,
    EntityRegistry,
    MapperError,
    NoResult,
    StorageKind,
    StorageKindResolver,
    StoreError,
    TypeMetadataProvider,
    UndeclaredStorageKindError,
    UnknownStorageKindError,
    build_key,
    decode_entity,
    decode_field,
    encode_entity,
    encode_field,
    entity,
    get_registry,
)

# Mapper
from kvmapper.mapper import EntityMapper

# Storage
from kvmapper.storage import (
    LocalStore,
    RedisStore,
    Store,
)

__all__ = [
    # Version
    "__version__",
    # Entity
    "entity",
    "get_registry",
    "EntityRegistry",
    "StorageKind",
    "NoResult",
    "NO_RESULT",
    # Keys and codec
    "build_key",
    "encode_field",
    "decode_field",
    "encode_entity",
    "decode_entity",
    # Resolution
    "StorageKindResolver",
    "TypeMetadataProvider",
    "AttributeMetadataProvider",
    # Errors
    "MapperError",
    "UnknownStorageKindError",
    "UndeclaredStorageKindError",
    "CodecError",
    "StoreError",
    # Mapper
    "EntityMapper",
    # Storage
    "Store",
    "LocalStore",
    "RedisStore",
]
