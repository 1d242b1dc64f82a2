"""
Pair Assembler: key blocks + value links -> KeyValuePair records.

For every key block the text and rectangle are computed once, then one record
is emitted per VALUE target that is a known value block. Consequences worth
keeping in mind:

- a key with no resolvable value target produces no record at all (it is not
  emitted with an empty value);
- a key linked to N value blocks produces N records with the same key;
- value blocks that no key references produce nothing.

The output order follows the key blocks' source order and is not meant to be
shown as-is; :func:`formlens.forms.reading_order.sort_pairs` fixes the final
order.
"""

from __future__ import annotations

from collections.abc import Mapping

from formlens.core.contracts.block import Block
from formlens.core.contracts.pair import KeyValuePair
from formlens.core.settings import get_logger
from formlens.forms.relationships import assemble_text, resolve_value_targets

logger = get_logger(__name__)


def assemble_pairs(
    by_id: Mapping[str, Block],
    key_blocks: Mapping[str, Block],
    value_blocks: Mapping[str, Block],
) -> list[KeyValuePair]:
    """Build one KeyValuePair per (key block, resolvable value block) link."""
    pairs: list[KeyValuePair] = []
    skipped = 0

    for key_block in key_blocks.values():
        key_text = assemble_text(key_block, by_id)
        key_box = key_block.bounding_box

        for value_id in resolve_value_targets(key_block):
            value_block = value_blocks.get(value_id)
            if value_block is None:
                skipped += 1
                continue
            pairs.append(
                KeyValuePair(
                    key=key_text,
                    value=assemble_text(value_block, by_id),
                    key_bounding_box=key_box,
                    value_bounding_box=value_block.bounding_box,
                )
            )

    if skipped:
        logger.debug("Skipped %d unresolved VALUE reference(s)", skipped)
    return pairs


__all__ = ["assemble_pairs"]
