# tests/conftest.py
"""
Shared builders for raw Textract-style blocks.

Tests describe small forms with these helpers instead of hand-writing the
PascalCase payload every time. The builders return the *raw* dictionaries
(as the service sends them); `Block.from_textract` / `blocks_from_response`
turn them into contracts.
"""

from __future__ import annotations

import struct
import zlib
from typing import Any

import pytest

from formlens.core.contracts.block import Block, blocks_from_response
from formlens.core.settings import load_settings


def raw_box(left: float, top: float, width: float = 0.1, height: float = 0.02) -> dict[str, Any]:
    """Raw `Geometry` entry with a bounding box."""
    return {"BoundingBox": {"Width": width, "Height": height, "Left": left, "Top": top}}


def raw_word(block_id: str, text: str | None) -> dict[str, Any]:
    """Raw WORD block."""
    raw: dict[str, Any] = {"Id": block_id, "BlockType": "WORD"}
    if text is not None:
        raw["Text"] = text
    return raw


def raw_kv(
    block_id: str,
    entity: str,
    children: list[str] | None = None,
    values: list[str] | None = None,
    geometry: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Raw KEY_VALUE_SET block tagged `entity` ('KEY' or 'VALUE')."""
    rels: list[dict[str, Any]] = []
    if values is not None:
        rels.append({"Type": "VALUE", "Ids": values})
    if children is not None:
        rels.append({"Type": "CHILD", "Ids": children})
    raw: dict[str, Any] = {
        "Id": block_id,
        "BlockType": "KEY_VALUE_SET",
        "EntityTypes": [entity],
        "Relationships": rels,
    }
    if geometry is not None:
        raw["Geometry"] = geometry
    return raw


def name_form() -> list[dict[str, Any]]:
    """One key 'Name' linked to the value 'John Doe'."""
    return [
        raw_kv("K1", "KEY", children=["W1"], values=["V1"], geometry=raw_box(0.1, 0.2)),
        raw_kv("V1", "VALUE", children=["W2", "W3"], geometry=raw_box(0.3, 0.2)),
        raw_word("W1", "Name"),
        raw_word("W2", "John"),
        raw_word("W3", "Doe"),
    ]


def to_blocks(raw: list[dict[str, Any]]) -> list[Block]:
    return blocks_from_response({"Blocks": raw})


def oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """A well-formed PNG whose IHDR declares ``width`` x ``height`` pixels."""

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )


@pytest.fixture(autouse=True)
def _test_environment(monkeypatch: Any) -> None:
    """Run every test with FORMLENS_ENV=test and a fresh settings cache."""
    monkeypatch.setenv("FORMLENS_ENV", "test")
    load_settings.cache_clear()
