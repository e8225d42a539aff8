"""Tests for the NbtTree container lifecycle and round trips."""
import io

import pytest

from conftest import entity_header, le_string, level_header
from tagtree.core import (
    NbtError,
    NbtTree,
    TagNodeByte,
    TagNodeCompound,
    TagNodeInt,
    TagNodeString,
    TreeHeader,
)
from tagtree.core.constants import EndiannessType, HeaderType


def _le_payload() -> bytes:
    return (
        b"\x0a" + le_string("")
        + b"\x03" + le_string("Version") + (19133).to_bytes(4, "little")
        + b"\x08" + le_string("LevelName") + le_string("My World")
        + b"\x00"
    )


@pytest.mark.unit
def test_new_tree_is_empty():
    tree = NbtTree()
    assert tree.root == TagNodeCompound()
    assert tree.name == ""
    assert tree.header_type is HeaderType.NONE
    assert tree.endianness is EndiannessType.BIG
    assert tree.version_saved == 0


@pytest.mark.unit
def test_wrap_existing_root_does_not_copy():
    root = TagNodeCompound()
    tree = NbtTree(root, "Level")
    root["x"] = TagNodeInt(1)

    assert tree.root is root
    assert tree.name == "Level"
    assert tree.root["x"] == TagNodeInt(1)


@pytest.mark.unit
@pytest.mark.parametrize("endianness", [EndiannessType.BIG, EndiannessType.LITTLE])
def test_round_trip_without_header(sample_root, endianness):
    tree = NbtTree(sample_root, "Data")
    data = tree.to_bytes(endianness)

    again = NbtTree()
    assert again.read_from(io.BytesIO(data), endianness)

    assert again.root == sample_root
    assert again.name == "Data"
    assert again.header_type is HeaderType.NONE
    assert again.endianness is endianness
    assert again.to_bytes() == data


@pytest.mark.unit
@pytest.mark.parametrize("wrap, header_type", [
    (level_header, HeaderType.LEVEL),
    (entity_header, HeaderType.ENTITY),
])
def test_headered_round_trip_is_byte_identical(wrap, header_type):
    source = wrap(8, _le_payload())

    tree = NbtTree.from_stream(io.BytesIO(source))
    assert tree is not None
    assert tree.header_type is header_type
    assert tree.version_saved == 8
    assert tree.endianness is EndiannessType.LITTLE
    assert tree.root["LevelName"] == TagNodeString("My World")

    out = io.BytesIO()
    written = tree.write_to(out)
    assert written == len(source)
    assert out.getvalue() == source


@pytest.mark.unit
def test_header_survives_modification():
    tree = NbtTree.from_stream(io.BytesIO(entity_header(2, _le_payload())))
    tree.root["Extra"] = TagNodeByte(1)

    data = tree.to_bytes()
    reread = NbtTree.from_stream(io.BytesIO(data))

    assert data[:4] == b"ENT\x00"
    assert reread.header_type is HeaderType.ENTITY
    assert reread.version_saved == 2
    assert reread.root["Extra"] == TagNodeByte(1)
    assert list(reread.root) == ["Version", "LevelName", "Extra"]


@pytest.mark.unit
def test_round_trip_with_sample_tree_and_headers(sample_root):
    for header_type in (HeaderType.LEVEL, HeaderType.ENTITY):
        tree = NbtTree(sample_root, "")
        tree.header = TreeHeader(header_type, EndiannessType.LITTLE, 42)
        data = tree.to_bytes()

        reread = NbtTree.from_stream(io.BytesIO(data))
        assert reread.root == sample_root
        assert reread.header == tree.header
        assert reread.to_bytes() == data


@pytest.mark.unit
def test_corrupt_header_yields_no_tree():
    data = bytearray(level_header(3, _le_payload()))
    data[4] ^= 0x01

    tree = NbtTree(TagNodeCompound({"old": TagNodeInt(1)}))
    assert tree.read_from(io.BytesIO(bytes(data))) is False
    assert tree.root is None
    assert NbtTree.from_stream(io.BytesIO(bytes(data))) is None

    with pytest.raises(NbtError):
        tree.write_to(io.BytesIO())


@pytest.mark.unit
def test_read_replaces_all_state():
    tree = NbtTree(TagNodeCompound({"old": TagNodeInt(1)}), "old")
    tree.read_from(io.BytesIO(level_header(9, _le_payload())))

    assert "old" not in tree.root
    assert tree.name == ""
    assert tree.header_type is HeaderType.LEVEL
    assert tree.version_saved == 9


@pytest.mark.unit
def test_write_to_explicit_endianness_overrides_cache(sample_root):
    tree = NbtTree(sample_root, "")
    big = tree.to_bytes()
    little = tree.to_bytes(EndiannessType.LITTLE)

    assert big != little
    reread = NbtTree.from_stream(io.BytesIO(little), EndiannessType.LITTLE)
    assert reread.root == sample_root


@pytest.mark.unit
def test_copy_is_deep_and_isolated(sample_root):
    tree = NbtTree(sample_root, "Data")
    tree.header = TreeHeader(HeaderType.LEVEL, EndiannessType.LITTLE, 4)

    clone = tree.copy()
    clone.root["added"] = TagNodeInt(1)
    clone.root["nested"]["deeper"]["x"] = TagNodeByte(1)

    assert "added" not in tree.root
    assert len(tree.root["nested"]["deeper"]) == 0
    assert clone.name == "Data"
    assert clone.header_type is HeaderType.NONE


@pytest.mark.unit
def test_repr():
    tree = NbtTree(TagNodeCompound({"a": TagNodeInt(1)}), "n")
    assert "name='n'" in repr(tree)
    assert "members=1" in repr(tree)
