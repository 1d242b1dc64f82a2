"""formlens: reading-ordered form key/value pairs from document-analysis blocks.

The package turns the flat block list returned by a forms-enabled document
analysis call into `(key, value)` records with their page rectangles, and can
draw those records back onto the source image for visual checking.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
