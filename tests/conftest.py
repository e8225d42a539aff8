import struct
import sys
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for local test runs without installation
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tagtree.core import (  # noqa: E402
    TagNodeByte,
    TagNodeByteArray,
    TagNodeCompound,
    TagNodeDouble,
    TagNodeFloat,
    TagNodeInt,
    TagNodeIntArray,
    TagNodeList,
    TagNodeLong,
    TagNodeLongArray,
    TagNodeShort,
    TagNodeShortArray,
    TagNodeString,
    TagType,
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line("markers", "cli: tests that drive the click command line")


def be_string(text: str) -> bytes:
    """Big-endian length-prefixed UTF-8 string."""
    raw = text.encode("utf-8")
    return struct.pack(">h", len(raw)) + raw


def le_string(text: str) -> bytes:
    """Little-endian length-prefixed UTF-8 string."""
    raw = text.encode("utf-8")
    return struct.pack("<h", len(raw)) + raw


def level_header(version: int, payload: bytes) -> bytes:
    return struct.pack("<II", version, len(payload)) + payload


def entity_header(version: int, payload: bytes) -> bytes:
    return b"ENT\x00" + struct.pack("<II", version, len(payload)) + payload


@pytest.fixture
def sample_root() -> TagNodeCompound:
    """Compound holding one member of every value kind."""
    position = TagNodeList(TagType.DOUBLE, [TagNodeDouble(1.5), TagNodeDouble(-64.25)])
    inventory = TagNodeList(
        TagType.COMPOUND,
        [
            TagNodeCompound({"id": TagNodeString("minecraft:stone"), "Count": TagNodeByte(64)}),
            TagNodeCompound({"id": TagNodeString("minecraft:dirt"), "Count": TagNodeByte(3)}),
        ],
    )
    return TagNodeCompound(
        {
            "byte": TagNodeByte(200),
            "short": TagNodeShort(-12345),
            "int": TagNodeInt(0x01020304),
            "long": TagNodeLong(-(2**40) + 7),
            "float": TagNodeFloat(0.25),
            "double": TagNodeDouble(3.141592653589793),
            "bytes": TagNodeByteArray(b"\x00\x7f\x80\xff"),
            "name": TagNodeString("Zaïre ✓"),
            "Pos": position,
            "Inventory": inventory,
            "empty": TagNodeList(TagType.INT),
            "nested": TagNodeCompound({"deeper": TagNodeCompound()}),
            "ints": TagNodeIntArray([1, -1, 2**31 - 1, -(2**31)]),
            "longs": TagNodeLongArray([2**63 - 1, -(2**63)]),
            "shorts": TagNodeShortArray([0, 1, -32768, 32767]),
        }
    )
