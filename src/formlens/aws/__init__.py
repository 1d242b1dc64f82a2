from __future__ import annotations

from .clients import FORMS_FEATURE, FormServices, S3ImageSource, TextractAnalyzer

__all__ = ["FORMS_FEATURE", "FormServices", "S3ImageSource", "TextractAnalyzer"]
