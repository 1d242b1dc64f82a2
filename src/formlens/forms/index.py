"""
Block Index: lookup structures over one analysis response.

The analysis service returns a flat list; edges between blocks are only id
references. This module builds, in a single pass:

- ``by_id``: id -> block for every block that carries an id,
- ``key_blocks``: KEY_VALUE_SET blocks tagged ``KEY``,
- ``value_blocks``: every other KEY_VALUE_SET block.

Role classification happens exactly once, here, so the rest of the package
never re-inspects entity tags. Blocks without an id cannot be referenced and
are skipped entirely. A repeated id overwrites the earlier entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from formlens.core.contracts.block import KEY, KEY_VALUE_SET, Block


class BlockRole(str, Enum):
    """Which half of a form field grouping a KEY_VALUE_SET block is."""

    KEY = "key"
    VALUE = "value"


def classify(block: Block) -> BlockRole | None:
    """Return the form role of ``block``, or ``None`` if it is not a KEY_VALUE_SET."""
    if block.kind != KEY_VALUE_SET:
        return None
    return BlockRole.KEY if KEY in block.role_hints else BlockRole.VALUE


@dataclass(slots=True)
class BlockIndex:
    """Id and role lookups for a single response. Insertion order follows the source."""

    by_id: dict[str, Block] = field(default_factory=dict)
    key_blocks: dict[str, Block] = field(default_factory=dict)
    value_blocks: dict[str, Block] = field(default_factory=dict)

    def get(self, block_id: str) -> Block | None:
        return self.by_id.get(block_id)

    def __len__(self) -> int:
        return len(self.by_id)


def build_index(blocks: Iterable[Block]) -> BlockIndex:
    """Index ``blocks`` by id and split KEY_VALUE_SET blocks by role."""
    index = BlockIndex()
    for block in blocks:
        if block.id is None:
            continue
        index.by_id[block.id] = block

        role = classify(block)
        if role is BlockRole.KEY:
            index.value_blocks.pop(block.id, None)
            index.key_blocks[block.id] = block
        elif role is BlockRole.VALUE:
            index.key_blocks.pop(block.id, None)
            index.value_blocks[block.id] = block
        else:
            index.key_blocks.pop(block.id, None)
            index.value_blocks.pop(block.id, None)
    return index


__all__ = ["BlockIndex", "BlockRole", "build_index", "classify"]
