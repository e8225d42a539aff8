"""
Tag tree value model.

One class per TagType. Every node carries exactly the payload for its
kind in ``value``; composites own their children exclusively, so
``copy()`` always yields a fully independent tree.
"""

from __future__ import annotations

import struct
from collections.abc import MutableMapping, MutableSequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Iterator, Optional

from tagtree.core.constants import HEADER_SIZES, EndiannessType, HeaderType, TagType
from tagtree.core.exceptions import TagTypeMismatchError


def _check_range(kind: str, value: int, low: int, high: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{kind} value must be int, got {type(value).__name__}")
    if not low <= value <= high:
        raise ValueError(f"{kind} value out of range [{low}, {high}]: {value}")


def _signed_bounds(bits: int) -> tuple[int, int]:
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _check_acyclic(container: "TagNode", node: "TagNode") -> None:
    """Reject ``node`` if ``container`` is ``node`` or lies inside it."""
    pending = [node]
    while pending:
        current = pending.pop()
        if current is container:
            raise ValueError(
                f"Cannot add {type(node).__name__} inside itself; trees must be acyclic"
            )
        if isinstance(current, TagNodeList):
            pending.extend(current.value)
        elif isinstance(current, TagNodeCompound):
            pending.extend(current.value.values())


class TagNode:
    """Base of all tag variants."""

    tag_type: ClassVar[TagType]

    def copy(self) -> "TagNode":
        raise NotImplementedError

    def to_python(self) -> Any:
        """Convert this subtree to plain Python values."""
        raise NotImplementedError


class TagNodeEnd(TagNode):
    """Compound terminator. Stateless; use the ``TAG_END`` instance."""

    tag_type = TagType.END

    def copy(self) -> "TagNodeEnd":
        return self

    def to_python(self) -> None:
        return None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TagNodeEnd)

    def __hash__(self) -> int:
        return hash(TagType.END)

    def __repr__(self) -> str:
        return "TAG_END"


TAG_END = TagNodeEnd()


# --- Scalars ---


@dataclass
class _IntegerNode(TagNode):
    value: int = 0

    _bits: ClassVar[int]

    def __post_init__(self) -> None:
        low, high = _signed_bounds(self._bits)
        _check_range(self.tag_type.name, self.value, low, high)

    def copy(self) -> "_IntegerNode":
        return type(self)(self.value)

    def to_python(self) -> int:
        return self.value


@dataclass
class TagNodeByte(_IntegerNode):
    """Single raw octet, 0..255."""

    tag_type = TagType.BYTE

    def __post_init__(self) -> None:
        _check_range("BYTE", self.value, 0, 0xFF)


@dataclass
class TagNodeShort(_IntegerNode):
    tag_type = TagType.SHORT
    _bits = 16


@dataclass
class TagNodeInt(_IntegerNode):
    tag_type = TagType.INT
    _bits = 32


@dataclass
class TagNodeLong(_IntegerNode):
    tag_type = TagType.LONG
    _bits = 64


@dataclass(eq=False)
class _FloatingNode(TagNode):
    value: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(
                f"{self.tag_type.name} value must be float, got {type(self.value).__name__}"
            )
        self.value = float(self.value)

    def __eq__(self, other: object) -> bool:
        # Bit patterns, so NaN equals itself after a round trip
        if other.__class__ is not self.__class__:
            return NotImplemented
        return struct.pack("<d", self.value) == struct.pack("<d", other.value)

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> "_FloatingNode":
        return type(self)(self.value)

    def to_python(self) -> float:
        return self.value


@dataclass(eq=False)
class TagNodeFloat(_FloatingNode):
    """IEEE-754 single precision; values are rounded on the wire."""

    tag_type = TagType.FLOAT


@dataclass(eq=False)
class TagNodeDouble(_FloatingNode):
    tag_type = TagType.DOUBLE


@dataclass
class TagNodeString(TagNode):
    value: str = ""

    tag_type = TagType.STRING

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"STRING value must be str, got {type(self.value).__name__}")

    def copy(self) -> "TagNodeString":
        return TagNodeString(self.value)

    def to_python(self) -> str:
        return self.value


# --- Arrays ---


@dataclass
class TagNodeByteArray(TagNode):
    value: bytearray = field(default_factory=bytearray)

    tag_type = TagType.BYTE_ARRAY

    def __post_init__(self) -> None:
        # bytearray() enforces the 0..255 element range
        self.value = bytearray(self.value)

    def __len__(self) -> int:
        return len(self.value)

    def copy(self) -> "TagNodeByteArray":
        return TagNodeByteArray(bytearray(self.value))

    def to_python(self) -> list[int]:
        return list(self.value)


@dataclass
class _IntegerArrayNode(TagNode):
    value: list[int] = field(default_factory=list)

    _bits: ClassVar[int]

    def __post_init__(self) -> None:
        self.value = list(self.value)
        low, high = _signed_bounds(self._bits)
        for item in self.value:
            _check_range(f"{self.tag_type.name} element", item, low, high)

    def __len__(self) -> int:
        return len(self.value)

    def copy(self) -> "_IntegerArrayNode":
        return type(self)(list(self.value))

    def to_python(self) -> list[int]:
        return list(self.value)


@dataclass
class TagNodeIntArray(_IntegerArrayNode):
    tag_type = TagType.INT_ARRAY
    _bits = 32


@dataclass
class TagNodeLongArray(_IntegerArrayNode):
    tag_type = TagType.LONG_ARRAY
    _bits = 64


@dataclass
class TagNodeShortArray(_IntegerArrayNode):
    tag_type = TagType.SHORT_ARRAY
    _bits = 16


# --- Composites ---


class TagNodeList(TagNode, MutableSequence):
    """
    Ordered, homogeneous sequence of tags.

    The element type is fixed at construction and recorded even when the
    list is empty.
    """

    tag_type = TagType.LIST

    def __init__(
        self, element_type: TagType, items: Optional[Iterable[TagNode]] = None
    ) -> None:
        element_type = TagType(element_type)
        if element_type is TagType.END:
            raise ValueError("List element type cannot be END")
        self.element_type = element_type
        self._items: list[TagNode] = []
        if items is not None:
            self.extend(items)

    @property
    def value(self) -> list[TagNode]:
        return self._items

    def _check(self, node: TagNode) -> TagNode:
        if not isinstance(node, TagNode) or node.tag_type is not self.element_type:
            got = getattr(node, "tag_type", type(node).__name__)
            raise TagTypeMismatchError(
                f"List of {self.element_type.name} cannot hold {got!s}"
            )
        _check_acyclic(self, node)
        return node

    def __getitem__(self, index):  # type: ignore[override]
        return self._items[index]

    def __setitem__(self, index, node) -> None:  # type: ignore[override]
        if isinstance(index, slice):
            self._items[index] = [self._check(n) for n in node]
        else:
            self._items[index] = self._check(node)

    def __delitem__(self, index) -> None:  # type: ignore[override]
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, index: int, node: TagNode) -> None:
        self._items.insert(index, self._check(node))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagNodeList):
            return NotImplemented
        return self.element_type is other.element_type and self._items == other._items

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> "TagNodeList":
        return TagNodeList(self.element_type, (item.copy() for item in self._items))

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self._items]

    def __repr__(self) -> str:
        return f"TagNodeList({self.element_type.name}, {self._items!r})"


class TagNodeCompound(TagNode, MutableMapping):
    """
    Named children, iterated in insertion order.

    Re-encoding a compound reproduces the member order it was read in.
    """

    tag_type = TagType.COMPOUND

    def __init__(self, members: Optional[Iterable[tuple[str, TagNode]] | dict] = None) -> None:
        self._members: dict[str, TagNode] = {}
        if members is not None:
            self.update(members)

    @property
    def value(self) -> dict[str, TagNode]:
        return self._members

    def __getitem__(self, name: str) -> TagNode:
        return self._members[name]

    def __setitem__(self, name: str, node: TagNode) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Compound member name must be str, got {type(name).__name__}")
        if not isinstance(node, TagNode) or isinstance(node, TagNodeEnd):
            raise TypeError(f"Compound member {name!r} must be a tag node, got {node!r}")
        _check_acyclic(self, node)
        self._members[name] = node

    def __delitem__(self, name: str) -> None:
        del self._members[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagNodeCompound):
            return NotImplemented
        return self._members == other._members

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> "TagNodeCompound":
        return TagNodeCompound((name, node.copy()) for name, node in self._members.items())

    def to_python(self) -> dict[str, Any]:
        return {name: node.to_python() for name, node in self._members.items()}

    def __repr__(self) -> str:
        return f"TagNodeCompound({self._members!r})"


NODE_CLASSES: dict[TagType, type[TagNode]] = {
    TagType.END: TagNodeEnd,
    TagType.BYTE: TagNodeByte,
    TagType.SHORT: TagNodeShort,
    TagType.INT: TagNodeInt,
    TagType.LONG: TagNodeLong,
    TagType.FLOAT: TagNodeFloat,
    TagType.DOUBLE: TagNodeDouble,
    TagType.BYTE_ARRAY: TagNodeByteArray,
    TagType.STRING: TagNodeString,
    TagType.LIST: TagNodeList,
    TagType.COMPOUND: TagNodeCompound,
    TagType.INT_ARRAY: TagNodeIntArray,
    TagType.LONG_ARRAY: TagNodeLongArray,
    TagType.SHORT_ARRAY: TagNodeShortArray,
}


def create_node(tag_type: TagType, element_type: TagType = TagType.BYTE) -> TagNode:
    """
    Build an empty/zero node of the given kind.

    Args:
        tag_type: Kind of node to build
        element_type: Element kind, only used for LIST

    Returns:
        A fresh node (``TAG_END`` for END)
    """
    tag_type = TagType(tag_type)
    if tag_type is TagType.END:
        return TAG_END
    if tag_type is TagType.LIST:
        return TagNodeList(element_type)
    return NODE_CLASSES[tag_type]()


@dataclass
class TreeHeader:
    """
    How a tree was laid out on the wire when it was last read.

    Attributes:
        header_type: Which prefix precedes the root tag
        endianness: Byte order of payload fields
        version: Format-specific version/build number (uint32)
    """

    header_type: HeaderType = HeaderType.NONE
    endianness: EndiannessType = EndiannessType.BIG
    version: int = 0

    def __post_init__(self) -> None:
        _check_range("version", self.version, 0, 0xFFFFFFFF)

    @property
    def size(self) -> int:
        """Header size in bytes (0 when there is no header)."""
        return HEADER_SIZES[self.header_type]

    def __repr__(self) -> str:
        return (
            f"TreeHeader(type={self.header_type.value}, "
            f"endianness={self.endianness.value}, "
            f"version={self.version})"
        )


@dataclass
class DecodedTree:
    """Result of one successful read: root name, root compound and header."""

    name: str
    root: TagNodeCompound
    header: TreeHeader = field(default_factory=TreeHeader)
