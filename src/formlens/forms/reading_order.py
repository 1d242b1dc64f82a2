"""
Reading-Order Sorter.

Orders pairs top-to-bottom, then left-to-right, by their anchor rectangle
(key box, falling back to the value box). Pairs with no rectangle at all go
last and keep their incoming relative order, which relies on ``sorted`` being
stable.
"""

from __future__ import annotations

from collections.abc import Iterable

from formlens.core.contracts.pair import KeyValuePair

_POSITIONED = 0
_UNPOSITIONED = 1


def reading_order_key(pair: KeyValuePair) -> tuple[int, float, float]:
    """Sort key: positioned pairs by ``(top, left)``, unpositioned pairs all equal."""
    anchor = pair.anchor
    if anchor is None:
        return (_UNPOSITIONED, 0.0, 0.0)
    return (_POSITIONED, anchor.top, anchor.left)


def sort_pairs(pairs: Iterable[KeyValuePair]) -> list[KeyValuePair]:
    """Return a new list of ``pairs`` in reading order (stable)."""
    return sorted(pairs, key=reading_order_key)


__all__ = ["reading_order_key", "sort_pairs"]
