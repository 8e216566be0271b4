from __future__ import annotations

from .const import MAX_VARINT_BYTES, UINT64_MASK


class ProtoWireError(ValueError):
    pass


def decode_varint(data: bytes | bytearray | memoryview, offset: int = 0) -> tuple[int, int]:
    """Decode a base-128 varint starting at ``offset``.

    Returns ``(value, new_offset)``. The value is truncated to 64 bits. Raises
    ``ProtoWireError`` if the input ends before a terminating byte or the
    varint runs past 10 bytes; the caller's offset is left as it was.
    """
    result = 0
    shift = 0
    pos = offset
    end = len(data)
    while True:
        if pos >= end:
            raise ProtoWireError("truncated varint")
        b = data[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if not (b & 0x80):
            return result & UINT64_MASK, pos
        shift += 7
        if pos - offset >= MAX_VARINT_BYTES:
            raise ProtoWireError("varint too long")


def encode_varint(value: int) -> bytes:
    if value < 0:
        raise ProtoWireError("negative varint not supported")
    if value > UINT64_MASK:
        raise ProtoWireError("varint does not fit in 64 bits")
    out = bytearray()
    while True:
        b = value & 0x7F
        value >>= 7
        if value:
            out.append(b | 0x80)
        else:
            out.append(b)
            break
    return bytes(out)
