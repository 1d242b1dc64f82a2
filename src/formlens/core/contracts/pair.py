"""
Key/Value Pair Contract

The output record of form reconstruction. One record is emitted per
(key block, linked value block) combination, so a key linked to several
values yields several records sharing the same key text and box. Records are
never de-duplicated.

Serialized shape (field order is part of the wire contract)::

    {
      "key": "Name",
      "value": "John Doe",
      "key_bounding_box": {"width": .., "height": .., "left": .., "top": ..} | null,
      "value_bounding_box": {...} | null
    }
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field, TypeAdapter

from formlens.core.contracts.block import BoundingBox


class KeyValuePair(BaseModel):
    """A reconstructed form field: key text, value text and their rectangles."""

    key: str = Field("", description="Reconstructed key text (may be empty).")
    value: str = Field("", description="Reconstructed value text (may be empty).")
    key_bounding_box: BoundingBox | None = Field(None, description="Key rectangle, if known.")
    value_bounding_box: BoundingBox | None = Field(None, description="Value rectangle, if known.")

    @property
    def anchor(self) -> BoundingBox | None:
        """Position used for reading order: the key box, else the value box."""
        if self.key_bounding_box is not None:
            return self.key_bounding_box
        return self.value_bounding_box


_PAIR_LIST = TypeAdapter(list[KeyValuePair])


def dump_pairs(pairs: Sequence[KeyValuePair], *, indent: int | None = None) -> str:
    """Serialize pairs to the JSON list exposed by the extraction endpoint."""
    return _PAIR_LIST.dump_json(list(pairs), indent=indent).decode("utf-8")


def load_pairs(data: str | bytes) -> list[KeyValuePair]:
    """Parse a JSON list produced by :func:`dump_pairs`."""
    return _PAIR_LIST.validate_json(data)


__all__ = ["KeyValuePair", "dump_pairs", "load_pairs"]
