"""Pipelines package for formlens.

Exposes the two request-level operations (pairs as data, pairs drawn on the
page) built on the form reconstruction core.
"""

from __future__ import annotations

from .form_extraction import analyze_image, display_image, extract_pairs

__all__ = ["analyze_image", "display_image", "extract_pairs"]
