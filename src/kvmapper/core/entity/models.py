"""Entity models: storage kinds, type metadata and the fetch sentinel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class StorageKind(Enum):
    """Declared storage shape of an entity type."""

    FIELD_MAP = auto()  # One key per type, one map field per entity field
    LIST = auto()  # One key per type, each persist appends a whole entity


class NoResult(Enum):
    """Sentinel returned by fetch when there is nothing to return.

    Distinct from None, empty lists and any entity instance. Falsy, so
    `if result:` reads naturally at call sites.
    """

    NO_RESULT = auto()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"


NO_RESULT = NoResult.NO_RESULT


@dataclass(slots=True, frozen=True)
class EntityTypeMeta:
    """Metadata for registered entity types."""

    type_name: str
    storage_kind: StorageKind | None
    fields: tuple[str, ...]
    is_pydantic: bool = False
    private_fields: frozenset[str] = frozenset()
    """Pydantic private attributes; set after model_construct rather than through it."""
