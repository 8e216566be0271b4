"""Schema-less protobuf to JSON projection.

Without a ``.proto`` file the parser has to guess what every length-delimited
value is. It tries, in order: a nested message, then a leaf rendered with the
configured ``BytesEncoding``. A nested candidate is rejected when it:

- is empty,
- is valid UTF-8 with no control characters (printable text is a string),
- decodes to zero fields,
- is valid UTF-8 and leaves trailing garbage or uses a reserved field number,
- contains an invalid or incomplete field.

At the top level only the first and third checks apply, and an invalid or
incomplete field stops decoding while keeping what was read so far.

The output is best effort. A field seen once cannot be told apart from a
repeated field with a single entry, and varints are not zig-zag decoded.
Repeated field numbers are grouped into a list. A byte list rendered with
``BytesEncoding.BYTE_ARRAY`` is a leaf: it is wrapped, never extended.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from .bytes_encoding import BytesEncoding, decode_utf8, encode_bytes, has_control_chars
from .config import ParserConfig
from .const import RESERVED_FIELD_NUMBERS, UINT64_MASK
from .proto_wire import (
    Fixed32Value,
    Fixed64Value,
    LengthDelimitedValue,
    Message,
    VarintValue,
    decode_message_once,
)

_LOGGER = logging.getLogger(__name__)


class LayerStatus(enum.Enum):
    REJECTED = "rejected"
    # Top level only: decoding stopped at an invalid or incomplete field.
    PARTIAL = "partial"
    FULL = "full"


@dataclass(frozen=True)
class LayerResult:
    status: LayerStatus
    value: dict[str, Any] | None = None

    @property
    def accepted(self) -> bool:
        return self.status is not LayerStatus.REJECTED


_REJECTED = LayerResult(LayerStatus.REJECTED)


def _add_value(out: dict[str, Any], grouped: set[str], key: str, value: Any) -> None:
    if key not in out:
        out[key] = value
        return
    if key in grouped:
        out[key].append(value)
        return
    # Lists rendered by BytesEncoding.BYTE_ARRAY are leaves, so track grouping separately.
    out[key] = [out[key], value]
    grouped.add(key)


class Parser:
    def __init__(self, config: ParserConfig | None = None) -> None:
        self._config = config or ParserConfig()

    @classmethod
    def with_bytes_encoding(cls, bytes_encoding: BytesEncoding) -> Parser:
        return cls(ParserConfig(bytes_encoding=BytesEncoding(bytes_encoding)))

    @property
    def config(self) -> ParserConfig:
        return self._config

    @property
    def bytes_encoding(self) -> BytesEncoding:
        return self._config.bytes_encoding

    def parse(self, data: bytes | bytearray | memoryview) -> dict[str, Any] | None:
        """Decode ``data`` as a top-level message.

        Returns ``None`` when the buffer does not look like a protobuf message.
        """
        return self.parse_layer(data, first_layer=True).value

    def parse_once(self, data: bytes | bytearray | memoryview) -> Message:
        return decode_message_once(data)

    def parse_layer(self, data: bytes | bytearray | memoryview, *, first_layer: bool, depth: int = 0) -> LayerResult:
        if len(data) == 0:
            return _REJECTED

        text = decode_utf8(data)
        if not first_layer and text is not None and not has_control_chars(text):
            return _REJECTED

        msg = decode_message_once(data)
        if not msg.fields:
            return _REJECTED

        if not first_layer and text is not None:
            if msg.garbage is not None:
                _LOGGER.debug("Rejecting nested UTF-8 candidate with %d bytes of garbage", len(msg.garbage))
                return _REJECTED
            if any(f.number in RESERVED_FIELD_NUMBERS for f in msg.fields):
                _LOGGER.debug("Rejecting nested UTF-8 candidate using a reserved field number")
                return _REJECTED

        out: dict[str, Any] = {}
        grouped: set[str] = set()
        for field in msg.fields:
            value = field.value
            if isinstance(value, (VarintValue, Fixed64Value, Fixed32Value)):
                rendered: Any = value.value & UINT64_MASK
            elif isinstance(value, LengthDelimitedValue):
                rendered = self._render_length_delimited(value.data, depth)
            else:
                # InvalidValue or IncompleteValue
                if first_layer:
                    _LOGGER.debug(
                        "Stopping at field %d (%s, wire type %d); returning %d decoded keys",
                        field.number,
                        type(value).__name__,
                        value.wire_type,
                        len(out),
                    )
                    return LayerResult(LayerStatus.PARTIAL, out)
                return _REJECTED
            _add_value(out, grouped, str(field.number), rendered)

        return LayerResult(LayerStatus.FULL, out)

    def _render_length_delimited(self, data: memoryview, depth: int) -> Any:
        if depth + 1 > self._config.max_depth:
            _LOGGER.debug(
                "Nesting depth %d exceeds %d; rendering %d bytes as a leaf",
                depth + 1,
                self._config.max_depth,
                len(data),
            )
        else:
            nested = self.parse_layer(data, first_layer=False, depth=depth + 1)
            if nested.accepted:
                return nested.value
        return encode_bytes(data, self._config.bytes_encoding)


def to_json(data: bytes | bytearray | memoryview, config: ParserConfig | None = None) -> dict[str, Any] | None:
    return Parser(config).parse(data)
