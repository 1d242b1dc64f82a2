"""
Form extraction pipeline: from an image name to pairs, or to an annotated PNG.

Flow Overview
-------------
1. **Analyze**: the document-analysis collaborator returns the block list.
2. **Index**: :func:`formlens.forms.index.build_index` splits key/value blocks.
3. **Assemble**: :func:`formlens.forms.pairs.assemble_pairs` resolves edges.
4. **Order**: :func:`formlens.forms.reading_order.sort_pairs` fixes the output order.
5. **Render** (display only): the source image is fetched, decoded, annotated
   and encoded as PNG.

Design Principles
-----------------
- **Explicit handles**: collaborators are arguments, never module globals, so
  every call is independent and tests substitute in-memory fakes.
- **All-or-nothing**: a collaborator failure propagates as an
  :class:`formlens.core.errors.UpstreamError`; no partial output is returned.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from formlens.core.contracts.block import Block
from formlens.core.contracts.pair import KeyValuePair
from formlens.core.settings import get_logger
from formlens.forms.index import build_index
from formlens.forms.pairs import assemble_pairs
from formlens.forms.reading_order import sort_pairs
from formlens.render.annotate import (
    LabelFont,
    decode_image,
    encode_png,
    render_annotations,
)

logger = get_logger(__name__)


class DocumentAnalyzer(Protocol):
    """Anything that can turn an image name into analysis blocks."""

    def analyze(self, image_name: str) -> list[Block]: ...


class ImageSource(Protocol):
    """Anything that can return the raw bytes of an image by name."""

    def fetch(self, image_name: str) -> bytes: ...


def extract_pairs(blocks: Iterable[Block]) -> list[KeyValuePair]:
    """Index, assemble and sort: the pure core over one analysis response."""
    index = build_index(blocks)
    pairs = assemble_pairs(index.by_id, index.key_blocks, index.value_blocks)
    logger.info(
        "Extracted %d pair(s) from %d block(s) (%d key, %d value)",
        len(pairs),
        len(index),
        len(index.key_blocks),
        len(index.value_blocks),
    )
    return sort_pairs(pairs)


def analyze_image(image_name: str, analyzer: DocumentAnalyzer) -> list[KeyValuePair]:
    """Run the analysis for ``image_name`` and return its pairs in reading order."""
    return extract_pairs(analyzer.analyze(image_name))


def display_image(
    image_name: str,
    analyzer: DocumentAnalyzer,
    images: ImageSource,
    font: LabelFont | None = None,
) -> bytes:
    """Return ``image_name`` as PNG bytes with its key/value boxes drawn on it."""
    image = decode_image(images.fetch(image_name))
    pairs = analyze_image(image_name, analyzer)
    annotated = render_annotations(image, pairs, font=font)
    return encode_png(annotated)


__all__ = [
    "DocumentAnalyzer",
    "ImageSource",
    "extract_pairs",
    "analyze_image",
    "display_image",
]
