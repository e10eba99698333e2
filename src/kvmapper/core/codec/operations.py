"""Tagged-value codec for field values and whole entities.

Every value is encoded as a self-describing node {"t": tag, "v": payload}
and the outermost node is rendered as compact JSON. Tags keep types that JSON
would otherwise blur apart (tuple vs list, int vs float, non-string map keys,
bytes, nested records), so decode(encode(v)) == v for every supported value.

Supported tags:
    none, bool, int, float, str, bytes, list, tuple, set, frozenset, map,
    datetime, date, record

Records are instances of types registered with @entity. A record node also
carries the qualified type name:
    {"t": "record", "type": "app.models.Address", "v": {"street": {...}}}
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, TypeVar

from kvmapper.core.entity.core import EntityRegistry, allocate, field_values, get_registry
from kvmapper.core.errors import CodecError

T = TypeVar("T")

_SEQUENCE_TAGS = {"list": list, "tuple": tuple, "set": set, "frozenset": frozenset}


def _encode_node(value: Any, registry: EntityRegistry) -> dict[str, Any]:
    """Convert a Python value to a tagged node."""
    # bool before int: bool is an int subclass
    if value is None:
        return {"t": "none"}
    if isinstance(value, bool):
        return {"t": "bool", "v": value}
    if isinstance(value, int):
        return {"t": "int", "v": value}
    if isinstance(value, float):
        return {"t": "float", "v": value}
    if isinstance(value, str):
        return {"t": "str", "v": value}
    if isinstance(value, bytes | bytearray):
        return {"t": "bytes", "v": base64.b64encode(bytes(value)).decode("ascii")}
    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime):
        return {"t": "datetime", "v": value.isoformat()}
    if isinstance(value, date):
        return {"t": "date", "v": value.isoformat()}
    if isinstance(value, list):
        return {"t": "list", "v": [_encode_node(item, registry) for item in value]}
    if isinstance(value, tuple):
        return {"t": "tuple", "v": [_encode_node(item, registry) for item in value]}
    if isinstance(value, frozenset):
        return {"t": "frozenset", "v": [_encode_node(item, registry) for item in value]}
    if isinstance(value, set):
        return {"t": "set", "v": [_encode_node(item, registry) for item in value]}
    if isinstance(value, dict):
        return {
            "t": "map",
            "v": [[_encode_node(k, registry), _encode_node(v, registry)] for k, v in value.items()],
        }

    meta = registry.get_meta(type(value))
    if meta is not None:
        return {
            "t": "record",
            "type": meta.type_name,
            "v": {
                name: _encode_node(field_value, registry)
                for name, field_value in field_values(value, meta).items()
            },
        }

    raise CodecError(
        f"Cannot encode value of type {type(value).__name__}. "
        f"Register record types with @entity."
    )


def _payload(node: dict[str, Any], expected: type | tuple[type, ...]) -> Any:
    """Extract and type-check a node payload."""
    if "v" not in node:
        raise CodecError(f"Node tagged {node.get('t')!r} has no payload")
    payload = node["v"]
    # bool payloads must not satisfy int/float checks and vice versa
    if isinstance(payload, bool) and bool not in _as_tuple(expected):
        raise CodecError(f"Node tagged {node['t']!r} has boolean payload")
    if not isinstance(payload, expected):
        raise CodecError(
            f"Node tagged {node['t']!r} has payload of type {type(payload).__name__}"
        )
    return payload


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _decode_node(node: Any, registry: EntityRegistry) -> Any:
    """Convert a tagged node back to a Python value."""
    if not isinstance(node, dict) or not isinstance(node.get("t"), str):
        raise CodecError(f"Malformed node: {node!r}")

    tag = node["t"]
    if tag == "none":
        return None
    if tag == "bool":
        return _payload(node, bool)
    if tag == "int":
        return _payload(node, int)
    if tag == "float":
        # JSON renders integral floats like 1.0, but accept ints written by other encoders
        return float(_payload(node, (int, float)))
    if tag == "str":
        return _payload(node, str)
    if tag == "bytes":
        try:
            return base64.b64decode(_payload(node, str), validate=True)
        except (binascii.Error, ValueError) as e:
            raise CodecError(f"Invalid base64 payload: {e}") from e
    if tag in ("datetime", "date"):
        text = _payload(node, str)
        try:
            return datetime.fromisoformat(text) if tag == "datetime" else date.fromisoformat(text)
        except ValueError as e:
            raise CodecError(f"Invalid {tag} payload {text!r}") from e
    if tag in _SEQUENCE_TAGS:
        items = [_decode_node(item, registry) for item in _payload(node, list)]
        try:
            return _SEQUENCE_TAGS[tag](items)
        except TypeError as e:
            raise CodecError(f"Unhashable item in {tag}: {e}") from e
    if tag == "map":
        result: dict[Any, Any] = {}
        for pair in _payload(node, list):
            if not isinstance(pair, list) or len(pair) != 2:
                raise CodecError(f"Malformed map entry: {pair!r}")
            key = _decode_node(pair[0], registry)
            try:
                result[key] = _decode_node(pair[1], registry)
            except TypeError as e:
                raise CodecError(f"Unhashable map key: {key!r}") from e
        return result
    if tag == "record":
        type_name = node.get("type")
        cls = registry.get_type(type_name) if isinstance(type_name, str) else None
        if cls is None:
            raise CodecError(f"Unknown record type: {type_name!r}")
        return _decode_record(node, cls, registry)

    raise CodecError(f"Unknown tag: {tag!r}")


def _decode_record(node: dict[str, Any], cls: type[T], registry: EntityRegistry) -> T:
    """Rebuild a record node as an instance of cls.

    Every field is decoded before the instance is allocated, so a failure
    never leaves a half-filled object behind.
    """
    meta = registry.get_meta(cls)
    if meta is None:
        raise CodecError(f"{cls.__name__} is not a registered entity type")
    if node.get("t") != "record" or node.get("type") != meta.type_name:
        raise CodecError(
            f"Expected record of type {meta.type_name}, got {node.get('type')!r}"
        )

    raw_fields = _payload(node, dict)
    missing = [name for name in meta.fields if name not in raw_fields]
    unexpected = [name for name in raw_fields if name not in meta.fields]
    if missing or unexpected:
        raise CodecError(
            f"Stored {meta.type_name} does not match declared fields "
            f"(missing={missing}, unexpected={unexpected})"
        )

    values = {name: _decode_node(raw_fields[name], registry) for name in meta.fields}
    return allocate(cls, meta, values)  # type: ignore[no-any-return]


def _dumps(node: dict[str, Any]) -> str:
    try:
        return json.dumps(node, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise CodecError(f"Cannot render encoded value: {e}") from e


def _loads(encoded: str | bytes) -> Any:
    try:
        return json.loads(encoded)
    except (TypeError, ValueError, RecursionError) as e:
        raise CodecError(f"Malformed encoded value: {e}") from e


@contextmanager
def _depth_guard(action: str) -> Iterator[None]:
    """Report values nested beyond the interpreter's recursion limit as CodecError."""
    try:
        yield
    except RecursionError as e:
        raise CodecError(f"Value nested too deeply to {action}") from e


def encode_field(value: Any, registry: EntityRegistry | None = None) -> str:
    """Encode a single field value.

    Args:
        value: Value to encode.
        registry: Registry used to recognise nested records (default: global).

    Returns:
        Encoded string safe to hand to any store.

    Raises:
        CodecError: If the value (or anything nested in it) is unsupported.
    """
    with _depth_guard("encode"):
        node = _encode_node(value, registry or get_registry())
    return _dumps(node)


def decode_field(encoded: str | bytes, registry: EntityRegistry | None = None) -> Any:
    """Decode a value produced by encode_field.

    Args:
        encoded: Encoded value.
        registry: Registry used to resolve nested record types (default: global).

    Returns:
        Value structurally equal to the one that was encoded.

    Raises:
        CodecError: If the input is malformed or references unknown types.
    """
    node = _loads(encoded)
    with _depth_guard("decode"):
        return _decode_node(node, registry or get_registry())


def encode_entity(obj: Any, registry: EntityRegistry | None = None) -> str:
    """Encode a whole entity instance as one record.

    Args:
        obj: Instance of a registered entity type.
        registry: Registry holding the type's metadata (default: global).

    Returns:
        Encoded string capturing every declared field.

    Raises:
        CodecError: If the type is unregistered or a field cannot be encoded.
    """
    registry = registry or get_registry()
    if registry.get_meta(type(obj)) is None:
        raise CodecError(f"{type(obj).__name__} is not a registered entity type")
    with _depth_guard("encode"):
        node = _encode_node(obj, registry)
    return _dumps(node)


def decode_entity(
    encoded: str | bytes, target_type: type[T], registry: EntityRegistry | None = None
) -> T:
    """Decode an encoded entity into a fresh instance of target_type.

    Args:
        encoded: Value produced by encode_entity.
        target_type: Entity class to allocate.
        registry: Registry holding the type's metadata (default: global).

    Returns:
        New, fully populated instance of target_type.

    Raises:
        CodecError: If the input is malformed, belongs to another type, or its
            fields do not match the declared fields of target_type.
    """
    registry = registry or get_registry()
    node = _loads(encoded)
    if not isinstance(node, dict):
        raise CodecError(f"Malformed entity node: {node!r}")
    with _depth_guard("decode"):
        return _decode_record(node, target_type, registry)
