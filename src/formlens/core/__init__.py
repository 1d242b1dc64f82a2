"""Core package initializer for formlens.

Holds configuration (`formlens.core.settings`) and the typed contracts shared
by the form reconstruction code, the renderer, and the HTTP/CLI surfaces.
"""

from __future__ import annotations

__all__ = ["__doc__"]
