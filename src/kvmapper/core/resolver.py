"""Storage kind resolution.

The resolver asks one or more metadata providers what storage kind a type
declares. "Undeclared" is an ordinary outcome (None), not an error; the
mapper decides how to react to it.

Usage:
    resolver = StorageKindResolver()                           # @entity registry only
    resolver = StorageKindResolver(get_registry(), AttributeMetadataProvider())
    kind = resolver.resolve(Counter)                           # StorageKind | None
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from kvmapper.core.entity.core import get_registry
from kvmapper.core.entity.models import StorageKind
from kvmapper.core.errors import UnknownStorageKindError

# Literals accepted from tag-style declarations. HASH is the historical name of FIELD_MAP.
_KIND_LITERALS = {
    "FIELD_MAP": StorageKind.FIELD_MAP,
    "HASH": StorageKind.FIELD_MAP,
    "LIST": StorageKind.LIST,
}


@runtime_checkable
class TypeMetadataProvider(Protocol):
    """Source of type-level storage kind declarations."""

    def declared_storage_kind(self, cls: type) -> StorageKind | str | None:
        """Return the kind declared by cls, or None if it declares none."""
        ...


class AttributeMetadataProvider:
    """Reads a storage kind tag from a class attribute.

    Only the class's own namespace is consulted, so subclasses do not inherit
    their parent's declaration (they would otherwise share its storage key
    shape under a different name).

    Usage:
        @dataclass
        class Event:
            __storage_kind__ = "LIST"
            name: str
    """

    def __init__(self, attribute: str = "__storage_kind__") -> None:
        self._attribute = attribute

    def declared_storage_kind(self, cls: type) -> StorageKind | str | None:
        value = vars(cls).get(self._attribute)
        return value  # type: ignore[no-any-return]


def normalize_kind(value: Any) -> StorageKind:
    """Convert a declared kind (enum member or literal) to a StorageKind.

    Args:
        value: Declared kind.

    Returns:
        Matching StorageKind member.

    Raises:
        UnknownStorageKindError: If value names no known kind.
    """
    if isinstance(value, StorageKind):
        return value
    if isinstance(value, str) and value.upper() in _KIND_LITERALS:
        return _KIND_LITERALS[value.upper()]
    raise UnknownStorageKindError(f"Unknown storage kind: {value!r}")


class StorageKindResolver:
    """Resolves the declared storage kind of a type from metadata providers.

    Args:
        providers: Providers consulted in order; the first declaration wins.
            Defaults to the global @entity registry.
    """

    def __init__(self, *providers: TypeMetadataProvider) -> None:
        self._providers: tuple[TypeMetadataProvider, ...] = providers or (get_registry(),)

    def resolve(self, cls: type) -> StorageKind | None:
        """Return the first storage kind declared for cls.

        Args:
            cls: Entity type to inspect.

        Returns:
            Declared StorageKind, or None if no provider declares one.

        Raises:
            UnknownStorageKindError: If a provider declares an unknown kind.
        """
        for provider in self._providers:
            declared = provider.declared_storage_kind(cls)
            if declared is not None:
                return normalize_kind(declared)
        return None
