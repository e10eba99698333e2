"""Entity registry and decorator.

Usage:
    @entity(storage=StorageKind.FIELD_MAP)
    @dataclass
    class Counter:
        value: int

    @entity(storage=StorageKind.LIST)
    @dataclass(slots=True, frozen=True)
    class Event:
        name: str

    # Nested records only need to be registered, not given a storage kind:
    @entity
    @dataclass
    class Address:
        street: str
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any, overload

from kvmapper.core.entity.models import EntityTypeMeta, StorageKind
from kvmapper.core.errors import CodecError, UnknownStorageKindError
from kvmapper.core.keys import build_key, qualified_name


def _field_names(cls: type) -> tuple[tuple[str, ...], frozenset[str]]:
    """Build the explicit field-descriptor list for a type.

    Every declared field is listed, including underscore-prefixed and
    init=False dataclass fields and pydantic private attributes.

    Returns:
        (ordered field names, names that are pydantic private attributes).
    """
    if _is_pydantic(cls):
        public = tuple(cls.model_fields)  # type: ignore[attr-defined]
        private = tuple(getattr(cls, "__private_attributes__", {}))
        return public + private, frozenset(private)
    return tuple(f.name for f in dataclasses.fields(cls)), frozenset()


class EntityRegistry:
    """Process-local registry mapping entity types to their storage metadata.

    Acts as the default type metadata provider: the storage kind declared
    through @entity is looked up here. Also resolves qualified type names
    back to classes so the codec can rebuild nested records.
    """

    def __init__(self) -> None:
        """Initialize empty entity registry."""
        self._by_type: dict[type, EntityTypeMeta] = {}
        self._by_name: dict[str, type] = {}
        self._by_key: dict[str, type] = {}

    def register(self, cls: type, storage: StorageKind | None = None) -> EntityTypeMeta:
        """Register an entity type and return its metadata.

        Args:
            cls: Entity class to register.
            storage: Declared storage kind, or None for a record that is only
                ever nested inside other entities.

        Returns:
            Entity metadata including qualified name, kind and field list.

        Raises:
            UnknownStorageKindError: If storage is not a StorageKind member.
            ValueError: If cls is already registered with a different kind.
            RuntimeError: If cls normalises to the same storage key as another type.
        """
        if storage is not None and not isinstance(storage, StorageKind):
            raise UnknownStorageKindError(f"Unknown storage kind: {storage!r}")

        if cls in self._by_type:
            existing = self._by_type[cls]
            if existing.storage_kind != storage:
                raise ValueError(
                    f"Entity {cls.__name__} already declared as {existing.storage_kind}, "
                    f"cannot redeclare as {storage}"
                )
            return existing

        type_name = qualified_name(cls)
        # Key suffix is kind independent, so checking one kind covers both
        key = build_key(StorageKind.FIELD_MAP, type_name)
        if key in self._by_key:
            existing_cls = self._by_key[key]
            raise RuntimeError(
                f"Storage key collision: {cls} and {existing_cls} both map to {key[2:]}"
            )

        fields, private = _field_names(cls)
        meta = EntityTypeMeta(
            type_name=type_name,
            storage_kind=storage,
            fields=fields,
            is_pydantic=_is_pydantic(cls),
            private_fields=private,
        )
        self._by_type[cls] = meta
        self._by_name[type_name] = cls
        self._by_key[key] = cls
        return meta

    def get_meta(self, cls: type) -> EntityTypeMeta | None:
        """Get metadata for a registered entity type.

        Args:
            cls: Entity class to look up.

        Returns:
            Entity metadata if registered, None otherwise.
        """
        return self._by_type.get(cls)

    def get_type(self, type_name: str) -> type | None:
        """Get entity type by its qualified name.

        Args:
            type_name: Qualified type name to look up.

        Returns:
            Entity class if found, None otherwise.
        """
        return self._by_name.get(type_name)

    def is_registered(self, cls: type) -> bool:
        """Check if a type is registered as an entity."""
        return cls in self._by_type

    def describe(self, cls: type) -> EntityTypeMeta:
        """Get metadata for cls, registering it without a storage kind if needed.

        Lets types whose kind is declared through another metadata provider
        (e.g. a class attribute tag) get a field-descriptor list on first use.

        Raises:
            TypeError: If cls is neither a dataclass nor Pydantic model.
        """
        meta = self._by_type.get(cls)
        if meta is None:
            _check_entity_class(cls)
            meta = self.register(cls)
        return meta

    def declared_storage_kind(self, cls: type) -> StorageKind | None:
        """Return the storage kind declared for cls, or None if undeclared."""
        meta = self._by_type.get(cls)
        return meta.storage_kind if meta is not None else None


# Module-level registry instance
_registry = EntityRegistry()


def get_registry() -> EntityRegistry:
    """Access the global entity registry.

    Returns:
        The process-local EntityRegistry instance.
    """
    return _registry


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _check_entity_class(cls: type) -> None:
    if not (dataclasses.is_dataclass(cls) or _is_pydantic(cls)):
        raise TypeError(
            f"Entity {cls.__name__} must be a dataclass or Pydantic model. "
            f"Did you forget @dataclass decorator?"
        )


@overload
def entity(cls: type) -> type: ...


@overload
def entity(
    cls: None = None, *, storage: StorageKind | None = None
) -> Callable[[type], type]: ...


def entity(
    cls: type | None = None, *, storage: StorageKind | None = None
) -> type | Callable[[type], type]:
    """Register a dataclass or Pydantic model as an entity type.

    Supports three forms:
        @entity                                  # nested record, no storage kind
        @entity()                                # same, parenthesized
        @entity(storage=StorageKind.LIST)        # persistable entity

    Args:
        cls: The class to register, or None if called with arguments.
        storage: Declared storage kind for the type.

    Returns:
        Decorated class or decorator function.

    Raises:
        TypeError: If class is neither a dataclass nor Pydantic model.

    Note:
        Apply @entity AFTER @dataclass:

        >>> @entity(storage=StorageKind.FIELD_MAP)
        ... @dataclass
        ... class Settings:
        ...     theme: str
    """

    def decorator(c: type) -> type:
        _check_entity_class(c)
        meta = _registry.register(c, storage=storage)
        c.__entity_meta__ = meta  # type: ignore
        return c

    if cls is None:
        return decorator
    else:
        return decorator(cls)


def field_values(obj: Any, meta: EntityTypeMeta) -> dict[str, Any]:
    """Read every declared field of an entity instance.

    Args:
        obj: Entity instance.
        meta: Metadata of the instance's type.

    Returns:
        Field name to current value, in declaration order.

    Raises:
        CodecError: If a declared field was never set, such as an init=False
            field or a pydantic private attribute without a default.
    """
    values: dict[str, Any] = {}
    for name in meta.fields:
        try:
            values[name] = getattr(obj, name)
        except AttributeError as e:
            raise CodecError(
                f"Field {type(obj).__name__}.{name} is not set and cannot be encoded"
            ) from e
    return values


def allocate(cls: type, meta: EntityTypeMeta, values: dict[str, Any]) -> Any:
    """Allocate a fresh instance of cls and fill its fields.

    Dataclasses are created without running __init__ or __post_init__, so
    frozen, slotted and init=False fields are restored as stored. Pydantic
    models go through model_construct, then private attributes are set.

    Args:
        cls: Entity class.
        meta: Metadata of cls.
        values: Complete mapping of field name to value.

    Returns:
        New instance of cls.
    """
    if meta.is_pydantic:
        public = {k: v for k, v in values.items() if k not in meta.private_fields}
        obj = cls.model_construct(**public)  # type: ignore[attr-defined]
        for name in meta.private_fields:
            setattr(obj, name, values[name])
        return obj

    obj = cls.__new__(cls)
    for name in meta.fields:
        object.__setattr__(obj, name, values[name])
    return obj
