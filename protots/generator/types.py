"""Scalar kinds and their wire-format properties."""

from dataclasses import dataclass
from enum import IntEnum

from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from .errors import UnsupportedTypeError

LONG_TYPE = "__long"


class WireType(IntEnum):
    """Binary framing category of an encoded value."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


@dataclass(frozen=True)
class ScalarKind:
    """Everything the codec needs to know about one field type.

    ts_type is None for message, group and enum kinds; those take the name of
    the resolved type instead. reader/writer are None for message kinds,
    which are always nested-encoded.
    """

    name: str
    ts_type: str | None
    default: str
    wire_type: WireType
    packable: bool
    reader: str | None
    writer: str | None

    @property
    def is_long(self) -> bool:
        return self.ts_type == LONG_TYPE


_T = FieldDescriptorProto

SCALAR_KINDS: dict[int, ScalarKind] = {
    _T.TYPE_DOUBLE: ScalarKind(
        "double", "number", "0.0", WireType.FIXED64, True, "readDouble", "writeDouble"
    ),
    _T.TYPE_FLOAT: ScalarKind(
        "float", "number", "0.0", WireType.FIXED32, True, "readFloat", "writeFloat"
    ),
    _T.TYPE_INT64: ScalarKind(
        "int64", LONG_TYPE, "__long.ZERO", WireType.VARINT, True, "readVarintSigned", "writeVarint"
    ),
    _T.TYPE_UINT64: ScalarKind(
        "uint64", LONG_TYPE, "__long.UZERO", WireType.VARINT, True, "readVarint", "writeVarint"
    ),
    _T.TYPE_INT32: ScalarKind(
        "int32", "number", "0", WireType.VARINT, True, "readVarInt32", "writeNumberAsVarint"
    ),
    _T.TYPE_FIXED64: ScalarKind(
        "fixed64", LONG_TYPE, "__long.UZERO", WireType.FIXED64, True, "readUint64", "writeUint64"
    ),
    _T.TYPE_FIXED32: ScalarKind(
        "fixed32", "number", "0", WireType.FIXED32, True, "readUint32", "writeUint32"
    ),
    _T.TYPE_BOOL: ScalarKind(
        "bool", "boolean", "false", WireType.VARINT, True, "readBool", "writeBool"
    ),
    _T.TYPE_STRING: ScalarKind(
        "string", "string", '""', WireType.LENGTH_DELIMITED, False, "readString", "writeString"
    ),
    _T.TYPE_GROUP: ScalarKind("group", None, "null", WireType.LENGTH_DELIMITED, False, None, None),
    _T.TYPE_MESSAGE: ScalarKind(
        "message", None, "null", WireType.LENGTH_DELIMITED, False, None, None
    ),
    _T.TYPE_BYTES: ScalarKind(
        "bytes",
        "Uint8Array",
        "new Uint8Array(0)",
        WireType.LENGTH_DELIMITED,
        False,
        "readBytes",
        "writeBytes",
    ),
    _T.TYPE_UINT32: ScalarKind(
        "uint32", "number", "0", WireType.VARINT, True, "readVarUint32", "writeNumberAsVarint"
    ),
    _T.TYPE_ENUM: ScalarKind(
        "enum", None, "0", WireType.VARINT, True, "readVarintSignedAsNumber", "writeNumberAsVarint"
    ),
    _T.TYPE_SFIXED32: ScalarKind(
        "sfixed32", "number", "0", WireType.FIXED32, True, "readInt32", "writeInt32"
    ),
    _T.TYPE_SFIXED64: ScalarKind(
        "sfixed64", LONG_TYPE, "__long.ZERO", WireType.FIXED64, True, "readInt64", "writeInt64"
    ),
    _T.TYPE_SINT32: ScalarKind(
        "sint32", "number", "0", WireType.VARINT, True, "readZigZag32", "writeZigZag32"
    ),
    _T.TYPE_SINT64: ScalarKind(
        "sint64", LONG_TYPE, "__long.ZERO", WireType.VARINT, True, "readZigZag64", "writeZigZag64"
    ),
}


def scalar_kind(field_type: int) -> ScalarKind:
    """Look up the kind for a field type, failing on anything unmapped."""
    kind = SCALAR_KINDS.get(field_type)
    if kind is None:
        raise UnsupportedTypeError(f"unexpected proto field type: {field_type}")
    return kind


def is_packable(field_type: int) -> bool:
    """Check if a repeated field of this type may use packed encoding."""
    return scalar_kind(field_type).packable
