"""Rendering of reconstructed pairs onto the source page image."""

from __future__ import annotations

from .annotate import decode_image, encode_png, load_label_font, render_annotations

__all__ = ["decode_image", "encode_png", "load_label_font", "render_annotations"]
