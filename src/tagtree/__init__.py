"""tagtree - named binary tag tree codec."""

__version__ = "1.0.0"

from .core import (  # noqa: E402
    EndiannessType,
    HeaderType,
    NbtError,
    NbtTree,
    TagNodeCompound,
    TagType,
    TreeReader,
    TreeWriter,
)

__all__ = [
    "NbtTree",
    "TreeReader",
    "TreeWriter",
    "TagNodeCompound",
    "TagType",
    "HeaderType",
    "EndiannessType",
    "NbtError",
]
