"""Tests for the record codec.

Focus: round-trip law (core guarantee), type preservation where JSON would
blur types, and loud failure on malformed or incompatible data.
"""

import json
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kvmapper import (
    CodecError,
    StorageKind,
    decode_entity,
    decode_field,
    encode_entity,
    encode_field,
    entity,
)


@entity
@dataclass
class Address:
    street: str
    number: int


@entity
@dataclass
class Box:
    content: Any


@entity(storage=StorageKind.LIST)
@dataclass
class Customer:
    name: str
    address: Address
    tags: list[str] = field(default_factory=list)
    _internal: int = 0


@entity(storage=StorageKind.LIST)
@dataclass(slots=True, frozen=True)
class Reading:
    sensor: str
    value: float


@dataclass
class Unregistered:
    value: int


_hashable = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.text(max_size=10),
)

_scalars = st.one_of(
    _hashable,
    st.floats(allow_nan=False),
    st.binary(max_size=16),
    st.dates(),
    st.datetimes(),
)


def _extend(children):
    return st.one_of(
        st.lists(children, max_size=4),
        st.lists(children, max_size=4).map(tuple),
        st.dictionaries(_hashable, children, max_size=4),
        st.frozensets(_hashable, max_size=4),
        st.sets(_hashable, max_size=4),
        st.builds(Box, children),
    )


_values = st.recursive(_scalars, _extend, max_leaves=12)


@given(value=_values)
def test_field_roundtrip_law(value):
    """PROPERTY: decode_field(encode_field(v)) == v for every supported value.

    This is the core guarantee of the codec: data integrity.
    """
    assert decode_field(encode_field(value)) == value


@given(value=_values)
def test_field_roundtrip_preserves_types(value):
    """PROPERTY: Round trip preserves the outer type, not just equality.

    Why: JSON alone turns tuples into lists and True == 1 would hide bool/int mixups.
    """
    assert type(decode_field(encode_field(value))) is type(value)


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        0,
        -17,
        2**80,
        1.0,
        float("inf"),
        "",
        "héllo",
        b"\x00\xff",
        (1, "a"),
        {1: "int key", "1": "str key", (2, 3): "tuple key"},
        {1, 2},
        frozenset({"x"}),
        date(2024, 2, 29),
        datetime(2024, 1, 1, 12, 30, tzinfo=UTC),
    ],
)
def test_field_roundtrip_examples(value):
    """Representative values survive the round trip with their exact type."""
    decoded = decode_field(encode_field(value))

    assert decoded == value
    assert type(decoded) is type(value)


def test_bool_and_int_stay_distinct():
    """True and 1 compare equal in Python but must not swap on decode."""
    assert decode_field(encode_field(True)) is True
    assert decode_field(encode_field(1)) is not True


def test_nested_record_roundtrip():
    """Registered records nested in field values are rebuilt as instances."""
    value = [Address("Main", 1), {"home": Address("Side", 2)}]

    decoded = decode_field(encode_field(value))

    assert decoded == value
    assert isinstance(decoded[0], Address)


def test_encoded_field_is_json_text():
    """Encoded values are plain strings any store accepts."""
    encoded = encode_field({"a": [1, 2]})

    assert isinstance(encoded, str)
    assert json.loads(encoded)["t"] == "map"


def test_entity_roundtrip_captures_all_fields():
    """encode_entity/decode_entity keeps every field, including private ones."""
    original = Customer("Ada", Address("Main", 1), ["vip"], _internal=42)

    restored = decode_entity(encode_entity(original), Customer)

    assert restored == original
    assert restored is not original
    assert restored._internal == 42


def test_entity_roundtrip_frozen_slots():
    """Frozen, slotted dataclasses can still be rebuilt."""
    original = Reading("t1", 21.5)

    restored = decode_entity(encode_entity(original), Reading)

    assert restored == original


def test_decode_entity_accepts_bytes():
    """Stores that return bytes are handled like str."""
    encoded = encode_entity(Reading("t1", 1.0)).encode("utf-8")

    assert decode_entity(encoded, Reading) == Reading("t1", 1.0)


@pytest.mark.parametrize(
    ("value", "message"),
    [
        (object(), "Cannot encode"),
        ([1, object()], "Cannot encode"),
        (10**5000, "Cannot render"),
    ],
    ids=["object", "nested-object", "huge-int"],
)
def test_unsupported_value_raises(value, message):
    """Arbitrary objects and ints too long for JSON are rejected loudly."""
    with pytest.raises(CodecError, match=message):
        encode_field(value)


def _nested_list(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


def test_deeply_nested_value_raises_on_encode():
    """Values nested past the recursion limit fail with CodecError, not RecursionError."""
    with pytest.raises(CodecError, match="nested too deeply"):
        encode_field(_nested_list(5000))


def test_deeply_nested_entity_raises_on_encode():
    with pytest.raises(CodecError, match="nested too deeply"):
        encode_entity(Customer("ada", Address("main", 1), tags=_nested_list(5000)))


@pytest.mark.parametrize(
    "encoded",
    [
        "[" * 100000 + "]" * 100000,
        '{"t":"list","v":[' * 2000 + '{"t":"none"}' + "]}" * 2000,
    ],
    ids=["json-arrays", "tagged-lists"],
)
def test_deeply_nested_input_raises_on_decode(encoded):
    """CRITICAL: Pathologically deep stored data is malformed data.

    Why: fetch only degrades CodecError to NO_RESULT.
    """
    with pytest.raises(CodecError):
        decode_field(encoded)


def test_deeply_nested_entity_raises_on_decode():
    deep = '{"t":"list","v":[' * 5000 + "]}" * 5000
    encoded = encode_entity(Reading("deep", 1.0)).replace('{"t":"str","v":"deep"}', deep)

    with pytest.raises(CodecError):
        decode_entity(encoded, Reading)


def test_unregistered_record_raises():
    """Dataclasses must be registered to be encoded as records."""
    with pytest.raises(CodecError, match="Cannot encode"):
        encode_field(Unregistered(1))
    with pytest.raises(CodecError, match="not a registered entity"):
        encode_entity(Unregistered(1))


@pytest.mark.parametrize(
    "encoded",
    [
        "not json",
        "",
        "[]",
        '{"v": 1}',
        '{"t": "int", "v": "1"}',
        '{"t": "int", "v": true}',
        '{"t": "int"}',
        '{"t": "bool", "v": 1}',
        '{"t": "bytes", "v": "!!!"}',
        '{"t": "date", "v": "yesterday"}',
        '{"t": "map", "v": [[{"t": "int", "v": 1}]]}',
        '{"t": "set", "v": [{"t": "list", "v": []}]}',
        '{"t": "complex", "v": [1, 2]}',
        '{"t": "record", "type": "no.such.Type", "v": {}}',
    ],
)
def test_malformed_field_raises(encoded):
    """CRITICAL: Malformed data fails with CodecError, never a garbage value."""
    with pytest.raises(CodecError):
        decode_field(encoded)


def test_decode_entity_type_mismatch_raises():
    """An encoded Reading cannot be decoded as a Customer."""
    encoded = encode_entity(Reading("t1", 1.0))

    with pytest.raises(CodecError, match="Expected record of type"):
        decode_entity(encoded, Customer)


def test_decode_entity_missing_field_raises():
    """CRITICAL: Missing fields fail instead of producing a partial entity."""
    node = json.loads(encode_entity(Reading("t1", 1.0)))
    del node["v"]["value"]

    with pytest.raises(CodecError, match="missing=\\['value'\\]"):
        decode_entity(json.dumps(node), Reading)


def test_decode_entity_unexpected_field_raises():
    """Fields the type does not declare are rejected."""
    node = json.loads(encode_entity(Reading("t1", 1.0)))
    node["v"]["extra"] = {"t": "none"}

    with pytest.raises(CodecError, match="unexpected=\\['extra'\\]"):
        decode_entity(json.dumps(node), Reading)


def test_decode_entity_bad_field_value_raises():
    """A single undecodable field fails the whole entity."""
    node = json.loads(encode_entity(Reading("t1", 1.0)))
    node["v"]["value"] = {"t": "float", "v": "warm"}

    with pytest.raises(CodecError):
        decode_entity(json.dumps(node), Reading)
