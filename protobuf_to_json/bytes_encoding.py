from __future__ import annotations

import base64
import enum
import re

# Unicode general category Cc.
_CONTROL_CHARS = re.compile("[\x00-\x1f\x7f-\x9f]")

_STFU8_ESCAPES = {
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
}


class BytesEncoding(str, enum.Enum):
    """How length-delimited values that are not nested messages are rendered."""

    # UTF-8 text when the bytes decode, base64 otherwise.
    AUTO = "auto"
    BASE64 = "base64"
    # JSON array of byte values.
    BYTE_ARRAY = "byte_array"
    # UTF-8 with invalid sequences replaced by U+FFFD.
    STRING_LOSSY = "string_lossy"
    # Printable text with backslash escapes for control characters and invalid bytes.
    STFU8 = "stfu8"
    HEX = "hex"


def has_control_chars(text: str) -> bool:
    return _CONTROL_CHARS.search(text) is not None


def decode_utf8(data: bytes | memoryview) -> str | None:
    try:
        return str(data, "utf-8")
    except UnicodeDecodeError:
        return None


def encode_stfu8(data: bytes | memoryview) -> str:
    """Encode arbitrary bytes as printable text without losing information.

    Valid UTF-8 passes through. Backslash, tab, newline and carriage return get
    their usual escapes; every other control character and every byte that is
    not part of a valid UTF-8 sequence becomes ``\\xNN``.
    """
    out: list[str] = []
    for ch in str(data, "utf-8", "surrogateescape"):
        code = ord(ch)
        if 0xDC80 <= code <= 0xDCFF:
            # Lone byte smuggled through by surrogateescape.
            out.append(f"\\x{code - 0xDC00:02x}")
        elif ch in _STFU8_ESCAPES:
            out.append(_STFU8_ESCAPES[ch])
        elif _CONTROL_CHARS.match(ch):
            out.extend(f"\\x{b:02x}" for b in ch.encode("utf-8"))
        else:
            out.append(ch)
    return "".join(out)


def encode_bytes(data: bytes | memoryview, encoding: BytesEncoding = BytesEncoding.AUTO) -> str | list[int]:
    encoding = BytesEncoding(encoding)
    if encoding is BytesEncoding.AUTO:
        text = decode_utf8(data)
        if text is not None:
            return text
        return base64.b64encode(data).decode("ascii")
    if encoding is BytesEncoding.BASE64:
        return base64.b64encode(data).decode("ascii")
    if encoding is BytesEncoding.BYTE_ARRAY:
        return list(data)
    if encoding is BytesEncoding.STRING_LOSSY:
        return str(data, "utf-8", "replace")
    if encoding is BytesEncoding.STFU8:
        return encode_stfu8(data)
    if encoding is BytesEncoding.HEX:
        return bytes(data).hex()
    raise ValueError(f"unknown bytes encoding: {encoding}")
