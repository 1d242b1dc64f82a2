# -----------------------------------------------------------------------------
# Thin boto3 wrappers around the two external collaborators:
#   - Amazon Textract AnalyzeDocument (FORMS) -> list[Block]
#   - Amazon S3 GetObject                     -> raw image bytes
#
# Neither wrapper retries or caches. SDK failures are translated into the
# upstream error taxonomy from `formlens.core.errors`, keeping the AWS error
# code, so the HTTP layer can fail the request with a meaningful status.
#
# The boto3 clients are injected; tests pass `MagicMock` clients and never
# touch the network. `FormServices.from_settings()` builds real clients from
# the configured region using the default credential chain.
# -----------------------------------------------------------------------------
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from formlens.core.contracts.block import Block, blocks_from_response
from formlens.core.errors import AnalysisError, ImageFetchError
from formlens.core.settings import Settings, get_logger, load_settings

logger = get_logger(__name__)

FORMS_FEATURE = "FORMS"


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", "Unknown"))


@dataclass(slots=True)
class TextractAnalyzer:
    """Run a FORMS analysis on an image stored in S3 and return its blocks.

    Parameters
    ----------
    client:
        A boto3 ``textract`` client.
    bucket:
        Bucket holding the images; the image name is used as the object key.
    """

    client: Any
    bucket: str

    def analyze(self, image_name: str) -> list[Block]:
        """Call ``AnalyzeDocument`` for ``image_name`` and convert the response.

        Raises
        ------
        AnalysisError
            If the Textract call fails, or its response cannot be converted.
        """
        logger.info("Starting Textract analysis: bucket=%s, key=%s", self.bucket, image_name)
        start = time.perf_counter()
        try:
            response = self.client.analyze_document(
                Document={"S3Object": {"Bucket": self.bucket, "Name": image_name}},
                FeatureTypes=[FORMS_FEATURE],
            )
        except ClientError as exc:
            code = _error_code(exc)
            logger.error("Textract API error: code=%s, key=%s", code, image_name)
            raise AnalysisError(f"Textract analysis failed: {exc}", error_code=code) from exc
        except BotoCoreError as exc:
            logger.error("Textract SDK error: %s", exc)
            raise AnalysisError(f"Textract analysis failed: {exc}") from exc

        try:
            blocks = blocks_from_response(response)
        except ValueError as exc:
            logger.error("Textract returned malformed blocks: key=%s", image_name)
            raise AnalysisError(f"Textract returned a malformed response: {exc}") from exc
        logger.info(
            "Textract analysis complete: blocks=%d, time=%dms",
            len(blocks),
            int((time.perf_counter() - start) * 1000),
        )
        return blocks


@dataclass(slots=True)
class S3ImageSource:
    """Fetch source page images from an S3 bucket."""

    client: Any
    bucket: str

    def fetch(self, image_name: str) -> bytes:
        """Return the raw bytes of ``image_name``.

        Raises
        ------
        ImageFetchError
            If the object cannot be read.
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=image_name)
            data: bytes = response["Body"].read()
        except ClientError as exc:
            code = _error_code(exc)
            logger.error("S3 get_object error: code=%s, key=%s", code, image_name)
            raise ImageFetchError(f"Could not fetch image {image_name!r}: {exc}", code) from exc
        except BotoCoreError as exc:
            logger.error("S3 SDK error: %s", exc)
            raise ImageFetchError(f"Could not fetch image {image_name!r}: {exc}") from exc

        logger.info("Fetched image: key=%s, size=%d bytes", image_name, len(data))
        return data


@dataclass(slots=True)
class FormServices:
    """The collaborator handles one request needs, passed in explicitly."""

    analyzer: TextractAnalyzer
    images: S3ImageSource
    label_font_path: str | None = None

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> FormServices:
        """Build boto3-backed services from ``config`` (defaults to the cached settings)."""
        cfg = config or load_settings()
        session = boto3.session.Session(region_name=cfg.aws_region)
        logger.info("Creating AWS clients: region=%s, bucket=%s", cfg.aws_region, cfg.s3_bucket)
        return cls(
            analyzer=TextractAnalyzer(client=session.client("textract"), bucket=cfg.s3_bucket),
            images=S3ImageSource(client=session.client("s3"), bucket=cfg.s3_bucket),
            label_font_path=cfg.label_font_path,
        )


__all__ = ["TextractAnalyzer", "S3ImageSource", "FormServices", "FORMS_FEATURE"]
