"""
Block Contract

Pydantic models for the flat block list returned by a forms-enabled
document-analysis call (Amazon Textract ``AnalyzeDocument`` with
``FeatureTypes=["FORMS"]``).

Each Block is one annotated region: a word, a line, or one half (key or
value) of a form field grouping. Blocks reference each other only through
typed relationship edges that carry lists of ids, so the list has to be
indexed before it can be walked (see :mod:`formlens.forms.index`).

The raw service payload uses PascalCase keys and nests the rectangle under
``Geometry.BoundingBox``. :meth:`Block.from_textract` flattens one raw block
into this contract; :func:`blocks_from_response` does it for a whole
response.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

# Block types consumed by the form reconstruction. Others are kept verbatim.
KEY_VALUE_SET = "KEY_VALUE_SET"
WORD = "WORD"
LINE = "LINE"

# Entity tag marking the key half of a KEY_VALUE_SET.
KEY = "KEY"

# Relationship edge types.
CHILD = "CHILD"
VALUE = "VALUE"


class BoundingBox(BaseModel):
    """Axis-aligned rectangle as fractions of the page width/height."""

    width: float = Field(..., description="Box width as a fraction of page width.")
    height: float = Field(..., description="Box height as a fraction of page height.")
    left: float = Field(..., description="Left edge as a fraction of page width.")
    top: float = Field(..., description="Top edge as a fraction of page height.")

    @classmethod
    def from_textract(cls, raw: Mapping[str, Any]) -> BoundingBox:
        return cls(
            width=raw.get("Width", 0.0),
            height=raw.get("Height", 0.0),
            left=raw.get("Left", 0.0),
            top=raw.get("Top", 0.0),
        )


class Relationship(BaseModel):
    """A typed, directed edge from one block to an ordered list of block ids."""

    type: str = Field(..., description="Edge type, e.g. 'CHILD' or 'VALUE'.")
    target_ids: list[str] = Field(default_factory=list, description="Referenced block ids.")


class Block(BaseModel):
    """One annotated region reported by the analysis service."""

    id: str | None = Field(None, description="Opaque identifier, unique per response.")
    kind: str = Field(..., description="Block type, e.g. 'WORD' or 'KEY_VALUE_SET'.")
    role_hints: frozenset[str] = Field(
        default_factory=frozenset, description="Entity tags such as 'KEY' or 'VALUE'."
    )
    text: str | None = Field(None, description="Literal text (present on WORD blocks).")
    bounding_box: BoundingBox | None = Field(
        None, description="Normalized rectangle, absent when geometry is unavailable."
    )
    relationships: list[Relationship] = Field(
        default_factory=list, description="Outgoing edges in source order."
    )

    @classmethod
    def from_textract(cls, raw: Mapping[str, Any]) -> Block:
        """Build a Block from one raw ``Blocks[i]`` entry of an analysis response."""
        geometry = raw.get("Geometry") or {}
        raw_box = geometry.get("BoundingBox")
        return cls(
            id=raw.get("Id"),
            kind=raw.get("BlockType", ""),
            role_hints=frozenset(raw.get("EntityTypes") or ()),
            text=raw.get("Text"),
            bounding_box=BoundingBox.from_textract(raw_box) if raw_box else None,
            relationships=[
                Relationship(type=rel.get("Type", ""), target_ids=list(rel.get("Ids") or ()))
                for rel in raw.get("Relationships") or ()
            ],
        )

    def edges(self, edge_type: str) -> list[Relationship]:
        """Return the outgoing edges of ``edge_type`` in source order."""
        return [rel for rel in self.relationships if rel.type == edge_type]


def blocks_from_response(payload: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> list[Block]:
    """Convert an ``AnalyzeDocument`` response (or its bare ``Blocks`` list) into Blocks.

    Raises ``ValueError`` if an entry is not a JSON object or fails validation.
    """
    raw_blocks = payload.get("Blocks", []) if isinstance(payload, Mapping) else payload
    blocks: list[Block] = []
    for position, raw in enumerate(raw_blocks):
        if not isinstance(raw, Mapping):
            raise ValueError(f"Block #{position} is {type(raw).__name__}, expected an object")
        blocks.append(Block.from_textract(raw))
    return blocks


__all__ = [
    "Block",
    "BoundingBox",
    "Relationship",
    "blocks_from_response",
    "KEY_VALUE_SET",
    "WORD",
    "LINE",
    "KEY",
    "CHILD",
    "VALUE",
]
