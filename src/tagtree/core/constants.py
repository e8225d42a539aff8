"""
Tag tree format constants, discriminants, and header layouts.
"""
import struct
from functools import lru_cache
from enum import Enum, IntEnum


class TagType(IntEnum):
    """On-wire discriminant byte of every tag."""

    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12
    SHORT_ARRAY = 13


class HeaderType(Enum):
    """Optional prefix in front of the root tag."""

    NONE = "none"
    LEVEL = "level"  # version(4) + payload_length(4)
    ENTITY = "entity"  # "ENT\0" + version(4) + payload_length(4)


class EndiannessType(Enum):
    """Byte order of multi-byte payload fields (never of single bytes)."""

    BIG = "big"
    LITTLE = "little"

    @property
    def prefix(self) -> str:
        """struct format prefix for this byte order."""
        return ">" if self is EndiannessType.BIG else "<"

    @classmethod
    def parse(cls, value: "str | EndiannessType") -> "EndiannessType":
        if isinstance(value, EndiannessType):
            return value
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(
                f"Invalid endianness: {value!r} (expected 'big' or 'little')"
            ) from None


# Header fields are always little-endian, whatever the payload uses.
# Fields: version, payload_length
HEADER_FIELDS_STRUCT = struct.Struct("<II")
ENTITY_MAGIC = b"ENT\x00"

LEVEL_HEADER_SIZE = HEADER_FIELDS_STRUCT.size  # 8 bytes
ENTITY_HEADER_SIZE = len(ENTITY_MAGIC) + HEADER_FIELDS_STRUCT.size  # 12 bytes

HEADER_SIZES = {
    HeaderType.NONE: 0,
    HeaderType.LEVEL: LEVEL_HEADER_SIZE,
    HeaderType.ENTITY: ENTITY_HEADER_SIZE,
}

# Per-kind struct format codes (without byte order prefix)
# Byte values are unsigned octets.
SCALAR_FORMATS = {
    TagType.BYTE: "B",
    TagType.SHORT: "h",
    TagType.INT: "i",
    TagType.LONG: "q",
    TagType.FLOAT: "f",
    TagType.DOUBLE: "d",
}

ARRAY_ELEMENT_FORMATS = {
    TagType.INT_ARRAY: "i",
    TagType.LONG_ARRAY: "q",
    TagType.SHORT_ARRAY: "h",
}

STRING_LENGTH_FORMAT = "h"  # signed, must be >= 0
ARRAY_LENGTH_FORMAT = "i"  # signed, must be >= 0

MAX_STRING_BYTES = 0x7FFF
MAX_ARRAY_LENGTH = 0x7FFFFFFF

# Error messages
MSG_END_OF_STREAM = "Read Error: Unexpected end of stream"
MSG_NEGATIVE_LENGTH = "Read Error: Negative length"
MSG_INVALID_TYPE = "Read Error: Invalid value type"


@lru_cache(maxsize=None)
def struct_for(endianness: EndiannessType, code: str) -> struct.Struct:
    """Compiled struct for a single field in the given byte order."""
    return struct.Struct(endianness.prefix + code)
