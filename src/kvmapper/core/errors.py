"""Mapper error hierarchy.

All errors raised by the mapping engine derive from MapperError so callers
can catch the whole family at once.
"""


class MapperError(Exception):
    """Base class for mapping failures."""

    pass


class UnknownStorageKindError(MapperError):
    """Raised when a storage kind falls outside the StorageKind enumeration."""

    pass


class UndeclaredStorageKindError(MapperError):
    """Raised when persisting a type that declares no storage kind."""

    pass


class CodecError(MapperError):
    """Raised when a value cannot be encoded or decoded."""

    pass


class StoreError(MapperError):
    """Raised when an underlying store operation fails."""

    pass
