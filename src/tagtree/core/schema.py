"""
Schema node contract.

Schema validators describe expected tree shapes with these nodes and use
them to synthesize defaults. The codec itself never consults a schema.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Optional

from tagtree.core.models import TagNode


class SchemaOptions(IntFlag):
    """Option flags modifying how a schema node is processed."""

    NONE = 0
    OPTIONAL = 1 << 0
    CREATE_ON_MISSING = 1 << 1


class SchemaNode:
    """
    Expected tag node, optionally valid only for a range of data versions.

    Attributes:
        name: Name of the corresponding tag
        options: SchemaOptions flags
        min_data_version: Lowest data version the node applies to (inclusive)
        max_data_version: Highest data version the node applies to (inclusive)
    """

    def __init__(
        self,
        name: str,
        options: SchemaOptions = SchemaOptions.NONE,
        min_data_version: Optional[int] = None,
        max_data_version: Optional[int] = None,
    ) -> None:
        if (
            min_data_version is not None
            and max_data_version is not None
            and min_data_version > max_data_version
        ):
            raise ValueError(
                f"Invalid data version range for {name!r}: "
                f"{min_data_version} > {max_data_version}"
            )
        self.name = name
        self.options = SchemaOptions(options)
        self.min_data_version = min_data_version
        self.max_data_version = max_data_version

    def applies_to(self, data_version: Optional[int]) -> bool:
        """Whether this node is expected in a tree of ``data_version``.

        An unknown version (None) matches every node.
        """
        if data_version is None:
            return True
        if self.min_data_version is not None and data_version < self.min_data_version:
            return False
        if self.max_data_version is not None and data_version > self.max_data_version:
            return False
        return True

    def build_default_tree(self) -> Optional[TagNode]:
        """Sensible default tag for this node; None when there is none."""
        return None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, options={self.options!r}, "
            f"versions={self.min_data_version}..{self.max_data_version})"
        )
