"""TreeReader for decoding tag trees from byte streams."""

from __future__ import annotations

import io
import os
import struct
from typing import BinaryIO, Callable, Optional

from tagtree.core.constants import (
    ARRAY_ELEMENT_FORMATS,
    ARRAY_LENGTH_FORMAT,
    ENTITY_MAGIC,
    HEADER_FIELDS_STRUCT,
    HEADER_SIZES,
    SCALAR_FORMATS,
    STRING_LENGTH_FORMAT,
    EndiannessType,
    HeaderType,
    TagType,
    struct_for,
)
from tagtree.core.exceptions import (
    EndOfStreamError,
    InvalidTagTypeError,
    NegativeLengthError,
)
from tagtree.core.models import (
    NODE_CLASSES,
    DecodedTree,
    TagNode,
    TagNodeByteArray,
    TagNodeCompound,
    TagNodeList,
    TagNodeString,
    TreeHeader,
)
from tagtree.utils.logging import get_logger

logger = get_logger(__name__)


class TreeReader:
    """
    Decodes one tag tree from a readable byte stream.

    The stream is consumed once, left to right. Layout detection looks at
    the first byte: a COMPOUND discriminant means a bare tree, anything
    else starts a level or entity header. A header forces little-endian
    payload decoding whatever endianness was requested.
    """

    def __init__(
        self,
        stream: BinaryIO,
        endianness: EndiannessType = EndiannessType.BIG,
    ) -> None:
        if not stream.seekable():
            # Header validation needs the stream length up front.
            stream = io.BytesIO(stream.read())
        self._f = stream
        self.endianness = endianness
        self._decoders: dict[TagType, Callable[[EndiannessType], TagNode]] = {
            TagType.BYTE: self._read_scalar_node(TagType.BYTE),
            TagType.SHORT: self._read_scalar_node(TagType.SHORT),
            TagType.INT: self._read_scalar_node(TagType.INT),
            TagType.LONG: self._read_scalar_node(TagType.LONG),
            TagType.FLOAT: self._read_scalar_node(TagType.FLOAT),
            TagType.DOUBLE: self._read_scalar_node(TagType.DOUBLE),
            TagType.BYTE_ARRAY: self._read_byte_array,
            TagType.STRING: self._read_string_node,
            TagType.LIST: self._read_list,
            TagType.COMPOUND: self._read_compound,
            TagType.INT_ARRAY: self._read_array_node(TagType.INT_ARRAY),
            TagType.LONG_ARRAY: self._read_array_node(TagType.LONG_ARRAY),
            TagType.SHORT_ARRAY: self._read_array_node(TagType.SHORT_ARRAY),
        }

    def read(self) -> Optional[DecodedTree]:
        """
        Decode the root tag and whatever header precedes it.

        Returns:
            DecodedTree, or None when a header is present but its length
            field disagrees with the stream or the root is not a compound

        Raises:
            EndOfStreamError: Stream ended inside a field
            NegativeLengthError: A length prefix was negative
            InvalidTagTypeError: Unknown discriminant
        """
        start = self._f.tell()
        endianness = self.endianness
        version = 0

        first = self._read_exact(1)
        if first[0] == TagType.COMPOUND:
            header_type = HeaderType.NONE
        else:
            block = first + self._read_exact(3)
            if block == ENTITY_MAGIC:
                header_type = HeaderType.ENTITY
                block = self._read_exact(4)
            else:
                # No magic: the block already is the version field
                header_type = HeaderType.LEVEL

            version, payload_length = HEADER_FIELDS_STRUCT.unpack(
                block + self._read_exact(4)
            )
            expected = self._stream_length(start) - HEADER_SIZES[header_type]
            if payload_length != expected:
                logger.warning(
                    "header_length_mismatch",
                    header_type=header_type.value,
                    payload_length=payload_length,
                    expected=expected,
                )
                return None

            root_type = self._read_exact(1)[0]
            if root_type != TagType.COMPOUND:
                logger.warning(
                    "header_root_not_compound",
                    header_type=header_type.value,
                    root_type=root_type,
                )
                return None
            endianness = EndiannessType.LITTLE

        logger.debug(
            "header_detected",
            header_type=header_type.value,
            format_version=version,
            endianness=endianness.value,
        )

        name = self._read_string(endianness)
        root = self._read_compound(endianness)
        return DecodedTree(
            name=name,
            root=root,
            header=TreeHeader(
                header_type=header_type, endianness=endianness, version=version
            ),
        )

    def _stream_length(self, start: int) -> int:
        """Bytes from ``start`` to the end of the stream."""
        here = self._f.tell()
        end = self._f.seek(0, os.SEEK_END)
        self._f.seek(here)
        return end - start

    # --- Primitive reads ---

    def _read_exact(self, n: int) -> bytes:
        data = self._f.read(n)
        if len(data) < n:
            raise EndOfStreamError(n, len(data))
        return data

    def _unpack(self, code: str, endianness: EndiannessType):
        fmt = struct_for(endianness, code)
        (value,) = fmt.unpack(self._read_exact(fmt.size))
        return value

    def _read_length(self, field: str, code: str, endianness: EndiannessType) -> int:
        length = self._unpack(code, endianness)
        if length < 0:
            raise NegativeLengthError(field, length)
        return length

    def _read_tag_type(self, context: str) -> TagType:
        raw = self._read_exact(1)[0]
        try:
            return TagType(raw)
        except ValueError:
            raise InvalidTagTypeError(raw, context) from None

    def _read_string(self, endianness: EndiannessType) -> str:
        length = self._read_length("string", STRING_LENGTH_FORMAT, endianness)
        # malformed sequences become U+FFFD
        return self._read_exact(length).decode("utf-8", errors="replace")

    # --- Values ---

    def _read_value(self, tag_type: TagType, endianness: EndiannessType) -> TagNode:
        decoder = self._decoders.get(tag_type)
        if decoder is None:
            raise InvalidTagTypeError(int(tag_type), "value")
        return decoder(endianness)

    def _read_scalar_node(self, tag_type: TagType) -> Callable[[EndiannessType], TagNode]:
        node_cls = NODE_CLASSES[tag_type]
        code = SCALAR_FORMATS[tag_type]

        def decode(endianness: EndiannessType) -> TagNode:
            return node_cls(self._unpack(code, endianness))

        return decode

    def _read_array_node(self, tag_type: TagType) -> Callable[[EndiannessType], TagNode]:
        node_cls = NODE_CLASSES[tag_type]
        code = ARRAY_ELEMENT_FORMATS[tag_type]
        width = struct.calcsize(code)

        def decode(endianness: EndiannessType) -> TagNode:
            length = self._read_length(
                tag_type.name.lower(), ARRAY_LENGTH_FORMAT, endianness
            )
            raw = self._read_exact(length * width)
            return node_cls(list(struct.unpack(f"{endianness.prefix}{length}{code}", raw)))

        return decode

    def _read_byte_array(self, endianness: EndiannessType) -> TagNodeByteArray:
        length = self._read_length("byte_array", ARRAY_LENGTH_FORMAT, endianness)
        return TagNodeByteArray(bytearray(self._read_exact(length)))

    def _read_string_node(self, endianness: EndiannessType) -> TagNodeString:
        return TagNodeString(self._read_string(endianness))

    def _read_list(self, endianness: EndiannessType) -> TagNodeList:
        element_type = self._read_tag_type("list element type")
        length = self._read_length("list", ARRAY_LENGTH_FORMAT, endianness)

        if element_type is TagType.END:
            # Declared END lists carry no elements; they come back as empty BYTE lists
            return TagNodeList(TagType.BYTE)

        node = TagNodeList(element_type)
        for _ in range(length):
            node.append(self._read_value(element_type, endianness))
        return node

    def _read_compound(self, endianness: EndiannessType) -> TagNodeCompound:
        node = TagNodeCompound()
        while True:
            member_type = self._read_tag_type("compound member")
            if member_type is TagType.END:
                return node
            name = self._read_string(endianness)
            node[name] = self._read_value(member_type, endianness)
