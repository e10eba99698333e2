"""Record codec: tagged encoding of field values and whole entities."""

from kvmapper.core.codec.operations import (
    decode_entity,
    decode_field,
    encode_entity,
    encode_field,
)

__all__ = [
    "encode_field",
    "decode_field",
    "encode_entity",
    "decode_entity",
]
