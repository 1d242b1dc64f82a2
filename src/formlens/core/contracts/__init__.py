"""Typed contracts for analysis input (blocks) and extraction output (pairs)."""

from __future__ import annotations

from .block import Block, BoundingBox, Relationship, blocks_from_response
from .pair import KeyValuePair, dump_pairs, load_pairs

__all__ = [
    "Block",
    "BoundingBox",
    "Relationship",
    "blocks_from_response",
    "KeyValuePair",
    "dump_pairs",
    "load_pairs",
]
