# Protobuf wire type codes (low 3 bits of a field tag).
WIRE_TYPE_VARINT = 0
WIRE_TYPE_FIXED64 = 1
WIRE_TYPE_LENGTH_DELIMITED = 2
WIRE_TYPE_FIXED32 = 5

# A varint never spans more than 10 bytes (64 bits of payload + continuation bits).
MAX_VARINT_BYTES = 10
UINT64_MASK = (1 << 64) - 1

# Field numbers reserved by the protobuf implementation itself. Seeing one in a
# nested candidate almost always means text that parsed by accident.
RESERVED_FIELD_NUMBERS = range(19000, 20000)

# Nested messages deeper than this are rendered as bytes instead of recursed into.
DEFAULT_MAX_DEPTH = 100
# Upper bound for max_depth. Every level adds two Python frames to the stack.
MAX_DEPTH_LIMIT = 200

CONF_BYTES_ENCODING = "bytes_encoding"
CONF_MAX_DEPTH = "max_depth"
