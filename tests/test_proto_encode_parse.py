from __future__ import annotations

import pytest

from protobuf_to_json.proto_wire import (
    Fixed32Value,
    Fixed64Value,
    LengthDelimitedValue,
    VarintValue,
    WireType,
    decode_field_value,
    decode_message_once,
    encode_bytes_field,
    encode_fixed32_field,
    encode_fixed64_field,
    encode_string,
    encode_varint_field,
    wire_type_from_code,
)
from protobuf_to_json.varint import ProtoWireError


def test_decode_all_wire_types() -> None:
    raw = b"".join(
        [
            encode_varint_field(1, 150),
            encode_fixed64_field(2, 0x0102030405060708),
            encode_string(3, "hello"),
            encode_fixed32_field(4, 0xDEADBEEF),
        ]
    )
    msg = decode_message_once(raw)
    assert msg.garbage is None
    assert [f.number for f in msg.fields] == [1, 2, 3, 4]
    assert msg.fields[0].value == VarintValue(150)
    assert msg.fields[1].value == Fixed64Value(0x0102030405060708)
    assert isinstance(msg.fields[2].value, LengthDelimitedValue)
    assert bytes(msg.fields[2].value.data) == b"hello"
    assert msg.fields[3].value == Fixed32Value(0xDEADBEEF)
    assert msg.fields[-1].end == len(raw)


def test_fixed_values_are_little_endian() -> None:
    (f,) = decode_message_once(b"\x0d\x1c\x00\x00\x00").fields
    assert f.value == Fixed32Value(28)
    (f,) = decode_message_once(b"\x31\xba\x32\xa9\x6c\xc1\x02\x00\x00").fields
    assert f.value == Fixed64Value(3029774971578)


def test_length_delimited_is_a_view_into_the_input() -> None:
    raw = encode_bytes_field(7, b"payload") + encode_varint_field(8, 1)
    (f, _) = decode_message_once(raw).fields
    assert isinstance(f.value, LengthDelimitedValue)
    assert f.value.data.obj is raw
    assert f.value.data.readonly


def test_bytearray_input_yields_read_only_views() -> None:
    raw = bytearray(encode_bytes_field(1, b"abc"))
    (f,) = decode_message_once(raw).fields
    assert f.value.data.readonly
    assert bytes(f.value.data) == b"abc"


def test_empty_length_delimited_value() -> None:
    (f,) = decode_message_once(encode_bytes_field(2, b"")).fields
    assert isinstance(f.value, LengthDelimitedValue)
    assert len(f.value.data) == 0


def test_decode_field_value_returns_new_offset() -> None:
    view = memoryview(b"\xac\x02\x05")
    value, offset = decode_field_value(view, 0, WireType.VARINT)
    assert value == VarintValue(300)
    assert offset == 2
    value, offset = decode_field_value(view, 2, WireType.VARINT)
    assert value == VarintValue(5)
    assert offset == 3


def test_wire_type_from_code() -> None:
    assert wire_type_from_code(0) is WireType.VARINT
    assert wire_type_from_code(1) is WireType.FIXED64
    assert wire_type_from_code(2) is WireType.LENGTH_DELIMITED
    assert wire_type_from_code(5) is WireType.FIXED32
    for code in (3, 4, 6, 7):
        assert wire_type_from_code(code) is None


def test_encode_fixed_rejects_out_of_range() -> None:
    with pytest.raises(ProtoWireError):
        encode_fixed32_field(1, 1 << 32)
    with pytest.raises(ProtoWireError):
        encode_fixed64_field(1, -1)


def test_encode_negative_varint_rejected() -> None:
    with pytest.raises(ProtoWireError):
        encode_varint_field(1, -1)
