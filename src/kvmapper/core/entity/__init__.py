"""Entity functionality: storage kinds, registry, decorator and allocation."""

from kvmapper.core.entity.core import (
    EntityRegistry,
    allocate,
    entity,
    field_values,
    get_registry,
)
from kvmapper.core.entity.models import NO_RESULT, EntityTypeMeta, NoResult, StorageKind

__all__ = [
    # Models
    "StorageKind",
    "EntityTypeMeta",
    "NoResult",
    "NO_RESULT",
    # Core
    "entity",
    "get_registry",
    "EntityRegistry",
    "field_values",
    "allocate",
]
