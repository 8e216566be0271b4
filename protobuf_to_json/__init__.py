"""Convert protobuf payloads to JSON-compatible values without a schema.

Field numbers become object keys. Length-delimited values are guessed to be
nested messages, strings or bytes from their content, so results are best
effort: see ``protobuf_to_json.parser`` for the rules.
"""

from __future__ import annotations

from .bytes_encoding import BytesEncoding, encode_bytes
from .config import CONFIG_SCHEMA, ConfigError, ParserConfig, config_from_dict
from .parser import LayerResult, LayerStatus, Parser, to_json
from .proto_wire import (
    Field,
    FieldValue,
    Fixed32Value,
    Fixed64Value,
    IncompleteValue,
    InvalidValue,
    LengthDelimitedValue,
    Message,
    VarintValue,
    WireType,
    decode_field_value,
    decode_message_once,
)
from .varint import ProtoWireError, decode_varint, encode_varint

__all__ = [
    "BytesEncoding",
    "CONFIG_SCHEMA",
    "ConfigError",
    "Field",
    "FieldValue",
    "Fixed32Value",
    "Fixed64Value",
    "IncompleteValue",
    "InvalidValue",
    "LayerResult",
    "LayerStatus",
    "LengthDelimitedValue",
    "Message",
    "Parser",
    "ParserConfig",
    "ProtoWireError",
    "VarintValue",
    "WireType",
    "config_from_dict",
    "decode_field_value",
    "decode_message_once",
    "decode_varint",
    "encode_bytes",
    "encode_varint",
    "to_json",
]
