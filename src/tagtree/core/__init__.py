"""Tag tree core: value model and codec."""

from .constants import EndiannessType, HeaderType, TagType
from .exceptions import (
    EndOfStreamError,
    InvalidTagTypeError,
    NbtError,
    NegativeLengthError,
    TagTypeMismatchError,
)
from .models import (
    TAG_END,
    DecodedTree,
    TagNode,
    TagNodeByte,
    TagNodeByteArray,
    TagNodeCompound,
    TagNodeDouble,
    TagNodeEnd,
    TagNodeFloat,
    TagNodeInt,
    TagNodeIntArray,
    TagNodeList,
    TagNodeLong,
    TagNodeLongArray,
    TagNodeShort,
    TagNodeShortArray,
    TagNodeString,
    TreeHeader,
    create_node,
)
from .schema import SchemaNode, SchemaOptions
from .tree import NbtTree
from .tree_reader import TreeReader
from .tree_writer import TreeWriter

__all__ = [
    "TagType",
    "HeaderType",
    "EndiannessType",
    "NbtError",
    "EndOfStreamError",
    "NegativeLengthError",
    "InvalidTagTypeError",
    "TagTypeMismatchError",
    "TAG_END",
    "TagNode",
    "TagNodeEnd",
    "TagNodeByte",
    "TagNodeShort",
    "TagNodeInt",
    "TagNodeLong",
    "TagNodeFloat",
    "TagNodeDouble",
    "TagNodeByteArray",
    "TagNodeString",
    "TagNodeList",
    "TagNodeCompound",
    "TagNodeIntArray",
    "TagNodeLongArray",
    "TagNodeShortArray",
    "create_node",
    "TreeHeader",
    "DecodedTree",
    "SchemaNode",
    "SchemaOptions",
    "NbtTree",
    "TreeReader",
    "TreeWriter",
]
