"""
Upstream failure taxonomy.

Everything inside form reconstruction degrades instead of failing. These
exceptions cover the collaborators around it (document analysis, object
storage, image decoding); any of them fails the current request as a whole.
"""

from __future__ import annotations


class UpstreamError(RuntimeError):
    """Base class for failures of an external collaborator."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        self.error_code = error_code
        super().__init__(message)


class AnalysisError(UpstreamError):
    """The document-analysis call failed."""


class ImageFetchError(UpstreamError):
    """The source image could not be retrieved from object storage."""


class ImageDecodeError(UpstreamError):
    """The source image bytes could not be decoded into a raster image."""


__all__ = ["UpstreamError", "AnalysisError", "ImageFetchError", "ImageDecodeError"]
