from __future__ import annotations

import enum
import logging
import struct
from dataclasses import dataclass
from typing import ClassVar, Union

from .const import (
    WIRE_TYPE_FIXED32,
    WIRE_TYPE_FIXED64,
    WIRE_TYPE_LENGTH_DELIMITED,
    WIRE_TYPE_VARINT,
)
from .varint import ProtoWireError, decode_varint, encode_varint

_LOGGER = logging.getLogger(__name__)

_FIXED32 = struct.Struct("<I")
_FIXED64 = struct.Struct("<Q")


class WireType(enum.IntEnum):
    VARINT = WIRE_TYPE_VARINT
    FIXED64 = WIRE_TYPE_FIXED64
    LENGTH_DELIMITED = WIRE_TYPE_LENGTH_DELIMITED
    FIXED32 = WIRE_TYPE_FIXED32


def wire_type_from_code(code: int) -> WireType | None:
    try:
        return WireType(code)
    except ValueError:
        return None


@dataclass(frozen=True)
class VarintValue:
    wire_type: ClassVar[int] = WireType.VARINT
    value: int


@dataclass(frozen=True)
class Fixed64Value:
    wire_type: ClassVar[int] = WireType.FIXED64
    value: int


@dataclass(frozen=True)
class Fixed32Value:
    wire_type: ClassVar[int] = WireType.FIXED32
    value: int


@dataclass(frozen=True)
class LengthDelimitedValue:
    wire_type: ClassVar[int] = WireType.LENGTH_DELIMITED
    data: memoryview


@dataclass(frozen=True)
class InvalidValue:
    """A value whose wire type code is not one of the four known ones.

    Its size cannot be known, so it swallows the rest of the message.
    """

    wire_type: int
    remaining: memoryview


@dataclass(frozen=True)
class IncompleteValue:
    """A value that needs more bytes than the buffer holds."""

    wire_type: WireType
    remaining: memoryview


FieldValue = Union[
    VarintValue,
    Fixed64Value,
    Fixed32Value,
    LengthDelimitedValue,
    InvalidValue,
    IncompleteValue,
]


@dataclass(frozen=True)
class Field:
    number: int
    value: FieldValue
    # Byte offsets of the tag start and the value end within the decoded buffer.
    start: int
    end: int


@dataclass(frozen=True)
class Message:
    fields: list[Field]
    garbage: memoryview | None = None


def _as_view(data: bytes | bytearray | memoryview) -> memoryview:
    view = memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    if not view.readonly:
        view = view.toreadonly()
    return view


def decode_field_value(view: memoryview, offset: int, wire_type: int) -> tuple[FieldValue, int]:
    """Decode one value of the given wire type code starting at ``offset``.

    Returns ``(value, new_offset)``. Invalid and incomplete values consume the
    rest of ``view``.
    """
    end = len(view)
    kind = wire_type_from_code(wire_type)
    if kind is None:
        return InvalidValue(wire_type, view[offset:]), end
    if kind is WireType.VARINT:
        try:
            v, offset = decode_varint(view, offset)
        except ProtoWireError:
            return IncompleteValue(WireType.VARINT, view[offset:]), end
        return VarintValue(v), offset
    if kind is WireType.FIXED64:
        if end - offset < 8:
            return IncompleteValue(WireType.FIXED64, view[offset:]), end
        return Fixed64Value(_FIXED64.unpack_from(view, offset)[0]), offset + 8
    if kind is WireType.LENGTH_DELIMITED:
        try:
            length, data_start = decode_varint(view, offset)
        except ProtoWireError:
            return IncompleteValue(WireType.LENGTH_DELIMITED, view[offset:]), end
        if end - data_start < length:
            return IncompleteValue(WireType.LENGTH_DELIMITED, view[data_start:]), end
        data_end = data_start + length
        return LengthDelimitedValue(view[data_start:data_end]), data_end
    # fixed32
    if end - offset < 4:
        return IncompleteValue(WireType.FIXED32, view[offset:]), end
    return Fixed32Value(_FIXED32.unpack_from(view, offset)[0]), offset + 4


def decode_message_once(data: bytes | bytearray | memoryview) -> Message:
    """Decode a single layer of fields without looking inside length-delimited values.

    Never raises: a tag that fails to decode ends the message and the rest of
    the buffer is kept as ``garbage``.
    """
    view = _as_view(data)
    fields: list[Field] = []
    offset = 0
    while offset < len(view):
        start = offset
        try:
            tag, offset = decode_varint(view, offset)
        except ProtoWireError as e:
            _LOGGER.debug(
                "Tag at offset %d failed to decode (%s); keeping %d trailing bytes as garbage",
                start,
                e,
                len(view) - start,
            )
            return Message(fields=fields, garbage=view[start:])
        value, offset = decode_field_value(view, offset, tag & 0x07)
        fields.append(Field(number=tag >> 3, value=value, start=start, end=offset))
    return Message(fields=fields)


def encode_key(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


def encode_length_delimited(payload: bytes) -> bytes:
    return encode_varint(len(payload)) + payload


def encode_bytes_field(field_number: int, payload: bytes) -> bytes:
    return encode_key(field_number, WireType.LENGTH_DELIMITED) + encode_length_delimited(payload)


def encode_string(field_number: int, value: str) -> bytes:
    return encode_bytes_field(field_number, value.encode("utf-8"))


def encode_varint_field(field_number: int, value: int) -> bytes:
    return encode_key(field_number, WireType.VARINT) + encode_varint(value)


def encode_fixed32_field(field_number: int, value: int) -> bytes:
    try:
        packed = _FIXED32.pack(value)
    except struct.error as e:
        raise ProtoWireError(f"fixed32 out of range: {value}") from e
    return encode_key(field_number, WireType.FIXED32) + packed


def encode_fixed64_field(field_number: int, value: int) -> bytes:
    try:
        packed = _FIXED64.pack(value)
    except struct.error as e:
        raise ProtoWireError(f"fixed64 out of range: {value}") from e
    return encode_key(field_number, WireType.FIXED64) + packed
