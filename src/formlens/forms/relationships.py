"""
Relationship Resolver: typed edge traversal over an indexed response.

Two walks are needed to reconstruct form fields:

- ``CHILD`` edges from a KEY_VALUE_SET block lead to its WORD blocks; their
  text, joined by single spaces in edge order, is the field text.
- ``VALUE`` edges from a key block lead to the ids of its value blocks.

Lookups that fail (dangling id, wrong block type, word without text) are
skipped; neither walk raises.
"""

from __future__ import annotations

from collections.abc import Mapping

from formlens.core.contracts.block import CHILD, VALUE, WORD, Block


def assemble_text(block: Block, by_id: Mapping[str, Block]) -> str:
    """Join the text of the WORD children of ``block`` with single spaces.

    Returns an empty string when no child resolves to a word with text.

    >>> from formlens.core.contracts.block import Relationship
    >>> words = {"w1": Block(id="w1", kind="WORD", text="Patient"),
    ...          "w2": Block(id="w2", kind="WORD", text="Name")}
    >>> key = Block(id="k", kind="KEY_VALUE_SET",
    ...             relationships=[Relationship(type="CHILD", target_ids=["w1", "w2"])])
    >>> assemble_text(key, words)
    'Patient Name'
    """
    words: list[str] = []
    for edge in block.edges(CHILD):
        for child_id in edge.target_ids:
            child = by_id.get(child_id)
            if child is None or child.kind != WORD or not child.text:
                continue
            words.append(child.text)
    return " ".join(words).strip()


def resolve_value_targets(key_block: Block) -> list[str]:
    """Return the ids referenced by every VALUE edge of ``key_block``, flattened in order."""
    return [target for edge in key_block.edges(VALUE) for target in edge.target_ids]


__all__ = ["assemble_text", "resolve_value_targets"]
