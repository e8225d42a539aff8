"""NbtTree: a root compound plus the layout it was last read with."""

from __future__ import annotations

import io
from typing import BinaryIO, Optional

from tagtree.core.constants import EndiannessType, HeaderType
from tagtree.core.exceptions import NbtError
from tagtree.core.models import TagNodeCompound, TreeHeader
from tagtree.core.tree_reader import TreeReader
from tagtree.core.tree_writer import TreeWriter


class NbtTree:
    """
    Root compound of a tag tree, with header metadata cached from the
    last read so that writing reproduces the source layout.

    The header fields are not invalidated when the tree is modified;
    ``write_to`` always wraps output according to them.
    """

    def __init__(
        self,
        root: Optional[TagNodeCompound] = None,
        name: str = "",
    ) -> None:
        """
        Args:
            root: Existing root to adopt (not copied); a new empty
                  compound when omitted
            name: Name of the root tag
        """
        self._root: Optional[TagNodeCompound] = (
            root if root is not None else TagNodeCompound()
        )
        self.name = name
        self.header_type = HeaderType.NONE
        self.endianness = EndiannessType.BIG
        self.version_saved = 0

    @classmethod
    def from_stream(
        cls,
        stream: BinaryIO,
        endianness: EndiannessType = EndiannessType.BIG,
    ) -> Optional["NbtTree"]:
        """Read a new tree; None when the stream's header is corrupt."""
        tree = cls()
        if not tree.read_from(stream, endianness):
            return None
        return tree

    @property
    def root(self) -> Optional[TagNodeCompound]:
        """Root compound; None after a read that found a corrupt header."""
        return self._root

    @property
    def header(self) -> TreeHeader:
        return TreeHeader(
            header_type=self.header_type,
            endianness=self.endianness,
            version=self.version_saved,
        )

    @header.setter
    def header(self, header: TreeHeader) -> None:
        self.header_type = header.header_type
        self.endianness = header.endianness
        self.version_saved = header.version

    def read_from(
        self,
        stream: BinaryIO,
        endianness: EndiannessType = EndiannessType.BIG,
    ) -> bool:
        """
        Replace root, name and header metadata with a tree read from
        ``stream``.

        ``endianness`` applies only to streams without a header; headered
        streams are always little-endian.

        Returns:
            False when the header is corrupt (root is then None)

        Raises:
            NbtError: On stream-level decoding faults
        """
        decoded = TreeReader(stream, endianness).read()
        if decoded is None:
            self._root = None
            return False

        self._root = decoded.root
        self.name = decoded.name
        self.header = decoded.header
        return True

    def write_to(
        self,
        stream: BinaryIO,
        endianness: Optional[EndiannessType] = None,
    ) -> int:
        """
        Append the encoded tree to ``stream``.

        Args:
            stream: Writable binary stream
            endianness: Payload byte order; this tree's cached endianness
                        when omitted

        Returns:
            Number of bytes written
        """
        if self._root is None:
            raise NbtError("Tree has no root to write")
        writer = TreeWriter(endianness or self.endianness)
        return writer.write(stream, self.name, self._root, self.header)

    def to_bytes(self, endianness: Optional[EndiannessType] = None) -> bytes:
        buf = io.BytesIO()
        self.write_to(buf, endianness)
        return buf.getvalue()

    def copy(self) -> "NbtTree":
        """
        Deep copy of the root (and its name).

        Header metadata is left at defaults; assign ``header`` on the copy
        to reproduce the source layout.
        """
        if self._root is None:
            raise NbtError("Tree has no root to copy")
        return NbtTree(self._root.copy(), self.name)

    def __repr__(self) -> str:
        members = len(self._root) if self._root is not None else None
        return (
            f"NbtTree(name={self.name!r}, members={members}, "
            f"header={self.header!r})"
        )
