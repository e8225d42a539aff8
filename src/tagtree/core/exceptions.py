"""Codec error taxonomy."""

from tagtree.core.constants import (
    MSG_END_OF_STREAM,
    MSG_INVALID_TYPE,
    MSG_NEGATIVE_LENGTH,
)


class NbtError(ValueError):
    """Base class for every tag tree codec fault."""


class EndOfStreamError(NbtError):
    """A read needed more bytes than the stream had left."""

    def __init__(self, wanted: int, got: int) -> None:
        super().__init__(f"{MSG_END_OF_STREAM} (wanted {wanted} bytes, got {got})")
        self.wanted = wanted
        self.got = got


class NegativeLengthError(NbtError):
    """A length-prefixed field decoded to a negative count."""

    def __init__(self, field: str, length: int) -> None:
        super().__init__(f"{MSG_NEGATIVE_LENGTH}: {field} length {length}")
        self.field = field
        self.length = length


class InvalidTagTypeError(NbtError):
    """A discriminant byte outside the known tag types."""

    def __init__(self, value: int, context: str) -> None:
        super().__init__(f"{MSG_INVALID_TYPE}: {value} in {context}")
        self.value = value
        self.context = context


class TagTypeMismatchError(NbtError, TypeError):
    """A node of the wrong kind was put into a typed list."""
