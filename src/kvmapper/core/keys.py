"""Storage key derivation.

Keys are derived from (storage kind, fully qualified type name) and never
stored. The same pair always yields the same key, and the two kinds use
different prefixes so one type can never land on both shapes at once.

Usage:
    build_key(StorageKind.FIELD_MAP, "app.models.Counter")  # "H_APP_MODELS_COUNTER"
    build_key(StorageKind.LIST, qualified_name(Event))      # "L_APP_MODELS_EVENT"

Limitation:
    No hashing is applied. Names that differ only by separator placement
    ("a.b_c.X" and "a_b.c.X") normalise to the same key. The entity registry
    refuses to register the second such type.
"""

from __future__ import annotations

from typing import Any

from kvmapper.core.entity.models import StorageKind
from kvmapper.core.errors import UnknownStorageKindError

_PREFIXES = {
    StorageKind.FIELD_MAP: "H_",
    StorageKind.LIST: "L_",
}

NAMESPACE_SEPARATOR = "."


def qualified_name(cls: type) -> str:
    """Return the fully qualified name of a class.

    Args:
        cls: Class to name.

    Returns:
        "module.QualName" string, stable across processes running the same code.
    """
    return f"{cls.__module__}.{cls.__qualname__}"


def build_key(kind: Any, type_name: str) -> str:
    """Build the storage key for a type stored with the given kind.

    Args:
        kind: Declared storage kind of the type.
        type_name: Fully qualified type name.

    Returns:
        Upper-cased key: kind prefix followed by the name with every
        namespace separator replaced by an underscore.

    Raises:
        UnknownStorageKindError: If kind is not a StorageKind member.
    """
    prefix = _PREFIXES.get(kind) if isinstance(kind, StorageKind) else None
    if prefix is None:
        raise UnknownStorageKindError(f"Unknown storage kind: {kind!r}")
    return (prefix + type_name.replace(NAMESPACE_SEPARATOR, "_")).upper()
