"""
TreeWriter for encoding tag trees, with optional level/entity headers.
"""
import io
import struct
from typing import BinaryIO, Callable

from tagtree.core.constants import *
from tagtree.core.exceptions import NbtError
from tagtree.core.models import (
    TagNode,
    TagNodeByteArray,
    TagNodeCompound,
    TagNodeList,
    TagNodeString,
    TreeHeader,
)
from tagtree.utils.logging import get_logger

logger = get_logger(__name__)


class TreeWriter:
    """
    Encodes (name, root) pairs in a fixed payload byte order.

    Headers need the payload length before the payload itself, so the
    payload is always encoded into an in-memory buffer first and written
    to the destination in one go, after the header when there is one.
    """

    def __init__(self, endianness: EndiannessType = EndiannessType.BIG):
        self.endianness = endianness
        self._encoders: dict[TagType, Callable[[BinaryIO, TagNode], None]] = {
            TagType.BYTE: self._write_scalar,
            TagType.SHORT: self._write_scalar,
            TagType.INT: self._write_scalar,
            TagType.LONG: self._write_scalar,
            TagType.FLOAT: self._write_scalar,
            TagType.DOUBLE: self._write_scalar,
            TagType.BYTE_ARRAY: self._write_byte_array,
            TagType.STRING: self._write_string_node,
            TagType.LIST: self._write_list,
            TagType.COMPOUND: self._write_compound,
            TagType.INT_ARRAY: self._write_array,
            TagType.LONG_ARRAY: self._write_array,
            TagType.SHORT_ARRAY: self._write_array,
        }

    def encode(self, name: str, root: TagNodeCompound) -> bytes:
        """
        Encode the root tag exactly as it appears without a header.

        Args:
            name: Root tag name
            root: Root compound

        Returns:
            Discriminant byte + name + compound payload

        Raises:
            NbtError: If a value does not fit its wire field
        """
        if not isinstance(root, TagNodeCompound):
            raise NbtError(f"Root must be a compound, got {type(root).__name__}")
        buf = io.BytesIO()
        self._write_tag(buf, name, root)
        return buf.getvalue()

    def write(
        self,
        stream: BinaryIO,
        name: str,
        root: TagNodeCompound,
        header: TreeHeader,
    ) -> int:
        """
        Write the root tag, wrapped in ``header.header_type``.

        The header's own fields are little-endian; the payload uses this
        writer's endianness.

        Returns:
            Number of bytes written to ``stream``
        """
        payload = self.encode(name, root)

        out = io.BytesIO()
        if header.header_type is HeaderType.ENTITY:
            out.write(ENTITY_MAGIC)
        if header.header_type is not HeaderType.NONE:
            if len(payload) > 0xFFFFFFFF:
                raise NbtError(f"Payload too large for header: {len(payload)} bytes")
            out.write(HEADER_FIELDS_STRUCT.pack(header.version, len(payload)))
        out.write(payload)

        data = out.getvalue()
        stream.write(data)

        logger.debug(
            "tree_written",
            header_type=header.header_type.value,
            endianness=self.endianness.value,
            payload_bytes=len(payload),
            total_bytes=len(data),
        )
        return len(data)

    # --- Primitive writes ---

    def _pack(self, out: BinaryIO, code: str, value) -> None:
        try:
            out.write(struct_for(self.endianness, code).pack(value))
        except (struct.error, OverflowError) as e:
            raise NbtError(f"Cannot encode {value!r} as {code!r}: {e}") from e

    def _write_length(self, out: BinaryIO, field: str, code: str, length: int, limit: int) -> None:
        if length > limit:
            raise NbtError(f"{field} too long: {length} (max {limit})")
        self._pack(out, code, length)

    def _write_string(self, out: BinaryIO, text: str) -> None:
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise NbtError(f"Cannot encode string {text!r} as UTF-8: {e}") from e
        self._write_length(out, "string", STRING_LENGTH_FORMAT, len(encoded), MAX_STRING_BYTES)
        out.write(encoded)

    def _write_tag(self, out: BinaryIO, name: str, node: TagNode) -> None:
        out.write(bytes((node.tag_type,)))
        self._write_string(out, name)
        self._write_value(out, node)

    # --- Values ---

    def _write_value(self, out: BinaryIO, node: TagNode) -> None:
        encoder = self._encoders.get(node.tag_type)
        if encoder is None:
            raise NbtError(f"Cannot encode {node!r} as a value")
        encoder(out, node)

    def _write_scalar(self, out: BinaryIO, node: TagNode) -> None:
        self._pack(out, SCALAR_FORMATS[node.tag_type], node.value)

    def _write_array(self, out: BinaryIO, node: TagNode) -> None:
        values = node.value
        code = ARRAY_ELEMENT_FORMATS[node.tag_type]
        self._write_length(out, node.tag_type.name.lower(), ARRAY_LENGTH_FORMAT, len(values), MAX_ARRAY_LENGTH)
        try:
            out.write(struct.pack(f"{self.endianness.prefix}{len(values)}{code}", *values))
        except struct.error as e:
            raise NbtError(f"Cannot encode {node.tag_type.name} elements: {e}") from e

    def _write_byte_array(self, out: BinaryIO, node: TagNodeByteArray) -> None:
        self._write_length(out, "byte_array", ARRAY_LENGTH_FORMAT, len(node.value), MAX_ARRAY_LENGTH)
        out.write(node.value)

    def _write_string_node(self, out: BinaryIO, node: TagNodeString) -> None:
        self._write_string(out, node.value)

    def _write_list(self, out: BinaryIO, node: TagNodeList) -> None:
        out.write(bytes((node.element_type,)))
        self._write_length(out, "list", ARRAY_LENGTH_FORMAT, len(node), MAX_ARRAY_LENGTH)
        for item in node:
            self._write_value(out, item)

    def _write_compound(self, out: BinaryIO, node: TagNodeCompound) -> None:
        for name, child in node.items():
            self._write_tag(out, name, child)
        out.write(bytes((TagType.END,)))
