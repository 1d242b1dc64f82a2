"""
Annotation Renderer: draw reconstructed pairs back onto the page image.

For every pair, the key rectangle is outlined in blue with its text in black
at the rectangle's top-left corner, and the value rectangle is outlined and
labelled in red. Pairs without rectangles leave no marks.

Coordinate conversion
---------------------
Boxes are normalized to the page, so each edge is scaled by the image size
and truncated toward zero::

    x = int(left * width_px)      y = int(top * height_px)
    w = int(width * width_px)     h = int(height * height_px)

The outline covers pixels ``x .. x + w - 1`` and ``y .. y + h - 1``. Thickness
is drawn as concentric one-pixel outlines, each grown by one pixel on every
side, so a 3-pixel stroke spreads outward from the box edge.

Decoding source bytes and encoding the result as PNG live here too, since
both sit at the rendering path's boundary.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from formlens.core.contracts.block import BoundingBox
from formlens.core.contracts.pair import KeyValuePair
from formlens.core.errors import ImageDecodeError
from formlens.core.settings import get_logger

logger = get_logger(__name__)

RGB = tuple[int, int, int]
LabelFont = ImageFont.FreeTypeFont | ImageFont.ImageFont

KEY_COLOR: RGB = (0, 0, 255)
KEY_TEXT_COLOR: RGB = (0, 0, 0)
VALUE_COLOR: RGB = (255, 0, 0)
VALUE_TEXT_COLOR: RGB = (255, 0, 0)
STROKE_THICKNESS = 3
LABEL_FONT_SIZE = 12


def to_pixel_rect(bbox: BoundingBox, width_px: int, height_px: int) -> tuple[int, int, int, int]:
    """Convert a normalized box to ``(x, y, w, h)`` pixels, truncating each value."""
    return (
        int(bbox.left * width_px),
        int(bbox.top * height_px),
        int(bbox.width * width_px),
        int(bbox.height * height_px),
    )


def load_label_font(path: str | Path | None = None, size: int = LABEL_FONT_SIZE) -> LabelFont:
    """Load the label font from ``path``, or Pillow's bundled default at ``size``."""
    if path is not None:
        return ImageFont.truetype(str(path), size)
    return ImageFont.load_default(size=size)


def draw_bounding_box(
    draw: ImageDraw.ImageDraw,
    bbox: BoundingBox,
    size: tuple[int, int],
    color: RGB,
    thickness: int = STROKE_THICKNESS,
) -> None:
    """Outline ``bbox`` with ``thickness`` concentric one-pixel rectangles."""
    x, y, w, h = to_pixel_rect(bbox, *size)
    # Degenerate boxes still get a one-pixel outline.
    w, h = max(w, 1), max(h, 1)
    for offset in range(thickness):
        draw.rectangle(
            (x - offset, y - offset, x + w - 1 + offset, y + h - 1 + offset),
            outline=color,
        )


def draw_label(
    draw: ImageDraw.ImageDraw,
    text: str,
    bbox: BoundingBox,
    size: tuple[int, int],
    color: RGB,
    font: LabelFont,
) -> None:
    """Write ``text`` with its top-left corner on the box's top-left pixel."""
    if not text:
        return
    x, y, _, _ = to_pixel_rect(bbox, *size)
    draw.text((x, y), text, fill=color, font=font)


def render_annotations(
    image: Image.Image,
    pairs: Iterable[KeyValuePair],
    font: LabelFont | None = None,
) -> Image.Image:
    """Return an RGB copy of ``image`` with every pair's boxes and labels drawn on it."""
    canvas = image.convert("RGB")
    draw = ImageDraw.Draw(canvas)
    label_font = font if font is not None else load_label_font()
    size = canvas.size

    drawn = 0
    for pair in pairs:
        if pair.key_bounding_box is not None:
            draw_bounding_box(draw, pair.key_bounding_box, size, KEY_COLOR)
            draw_label(draw, pair.key, pair.key_bounding_box, size, KEY_TEXT_COLOR, label_font)
            drawn += 1
        if pair.value_bounding_box is not None:
            draw_bounding_box(draw, pair.value_bounding_box, size, VALUE_COLOR)
            draw_label(
                draw, pair.value, pair.value_bounding_box, size, VALUE_TEXT_COLOR, label_font
            )
            drawn += 1

    logger.debug("Drew %d box(es) on a %dx%d image", drawn, *size)
    return canvas


def decode_image(data: bytes) -> Image.Image:
    """Decode raw image bytes into an RGB image.

    Raises
    ------
    ImageDecodeError
        If the bytes are not a readable raster image, or declare a size past
        Pillow's decompression-bomb limit.
    """
    try:
        with Image.open(io.BytesIO(data)) as src:
            return src.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Could not decode source image: {exc}") from exc


def encode_png(image: Image.Image) -> bytes:
    """Encode ``image`` as PNG bytes."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


__all__ = [
    "KEY_COLOR",
    "KEY_TEXT_COLOR",
    "VALUE_COLOR",
    "VALUE_TEXT_COLOR",
    "STROKE_THICKNESS",
    "LABEL_FONT_SIZE",
    "to_pixel_rect",
    "load_label_font",
    "draw_bounding_box",
    "draw_label",
    "render_annotations",
    "decode_image",
    "encode_png",
]
