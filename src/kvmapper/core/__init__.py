"""Core functionalities: stateless primitives of the mapping engine.

Architecture Note:
    core/ contains pure functions and declarative metadata: kind resolution,
    key derivation and the record codec. Nothing here talks to a store.
    For the stateful orchestration, see mapper/ and storage/.
"""

from kvmapper.core.codec import decode_entity, decode_field, encode_entity, encode_field
from kvmapper.core.entity import (
    NO_RESULT,
    EntityRegistry,
    EntityTypeMeta,
    NoResult,
    StorageKind,
    entity,
    get_registry,
)
from kvmapper.core.errors import (
    CodecError,
    MapperError,
    StoreError,
    UndeclaredStorageKindError,
    UnknownStorageKindError,
)
from kvmapper.core.keys import build_key, qualified_name
from kvmapper.core.resolver import (
    AttributeMetadataProvider,
    StorageKindResolver,
    TypeMetadataProvider,
    normalize_kind,
)

__all__ = [
    # Entity
    "entity",
    "get_registry",
    "EntityRegistry",
    "EntityTypeMeta",
    "StorageKind",
    "NoResult",
    "NO_RESULT",
    # Keys
    "build_key",
    "qualified_name",
    # Codec
    "encode_field",
    "decode_field",
    "encode_entity",
    "decode_entity",
    # Resolver
    "StorageKindResolver",
    "TypeMetadataProvider",
    "AttributeMetadataProvider",
    "normalize_kind",
    # Errors
    "MapperError",
    "UnknownStorageKindError",
    "UndeclaredStorageKindError",
    "CodecError",
    "StoreError",
]
