"""Form reconstruction: block index, edge resolution, pair assembly, reading order."""

from __future__ import annotations

from .index import BlockIndex, BlockRole, build_index, classify
from .pairs import assemble_pairs
from .reading_order import reading_order_key, sort_pairs
from .relationships import assemble_text, resolve_value_targets

__all__ = [
    "BlockIndex",
    "BlockRole",
    "build_index",
    "classify",
    "assemble_text",
    "resolve_value_targets",
    "assemble_pairs",
    "reading_order_key",
    "sort_pairs",
]
