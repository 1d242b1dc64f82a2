# tests/test_api_integration.py
"""
Integration Tests for the formlens HTTP API.

Focus
-----
These tests verify the HTTP contract of `/analyze`, `/display` and `/health`.
They DO NOT call AWS; the application is built around real
`TextractAnalyzer` / `S3ImageSource` wrappers whose boto3 clients are mocks.

Scenarios
---------
1. **Health Check**: Verify service is up and reports its environment.
2. **Happy Path**: JSON pairs in reading order; annotated PNG of the same size.
3. **Error Handling**: Upstream failures map to 502, undecodable images to 422.
"""

from __future__ import annotations

import io
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from conftest import name_form, oversized_png, raw_box, raw_kv, raw_word
from fastapi.testclient import TestClient
from PIL import Image

from formlens import __version__ as PKG_VERSION
from formlens.api.app import create_app
from formlens.aws.clients import FormServices, S3ImageSource, TextractAnalyzer


def _png_bytes(width: int = 640, height: int = 480) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture  # type: ignore[misc]
def textract() -> MagicMock:
    """Mock Textract client answering with a two-row form (listed bottom-up)."""
    client = MagicMock()
    client.analyze_document.return_value = {
        "Blocks": [
            raw_kv("K2", "KEY", children=["W9"], values=["V2"], geometry=raw_box(0.1, 0.7)),
            raw_kv("V2", "VALUE", children=[], geometry=raw_box(0.4, 0.7)),
            raw_word("W9", "Signature"),
        ]
        + name_form()
    }
    return client


@pytest.fixture  # type: ignore[misc]
def s3() -> MagicMock:
    """Mock S3 client serving a blank 640x480 PNG."""
    client = MagicMock()
    client.get_object.side_effect = lambda **_: {"Body": io.BytesIO(_png_bytes())}
    return client


@pytest.fixture  # type: ignore[misc]
def client(textract: MagicMock, s3: MagicMock) -> Generator[TestClient, None, None]:
    """API client over mock-backed services."""
    services = FormServices(
        analyzer=TextractAnalyzer(client=textract, bucket="test-bucket"),
        images=S3ImageSource(client=s3, bucket="test-bucket"),
    )
    with TestClient(create_app(services=services)) as c:
        yield c


def test_health_check(client: TestClient) -> None:
    """GET /health should return 200 OK, the environment and the package version."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["environment"] == "test"
    assert data["version"] == PKG_VERSION


def test_analyze_returns_pairs_in_reading_order(client: TestClient, textract: MagicMock) -> None:
    """GET /analyze/{name} returns the JSON pair list, top row first."""
    response = client.get("/analyze/intake.png")

    assert response.status_code == 200
    data = response.json()
    assert [(p["key"], p["value"]) for p in data] == [("Name", "John Doe"), ("Signature", "")]
    assert data[0]["key_bounding_box"] == {"width": 0.1, "height": 0.02, "left": 0.1, "top": 0.2}
    assert data[1]["value_bounding_box"]["left"] == 0.4

    textract.analyze_document.assert_called_once_with(
        Document={"S3Object": {"Bucket": "test-bucket", "Name": "intake.png"}},
        FeatureTypes=["FORMS"],
    )


def test_analyze_null_boxes_are_serialized(client: TestClient, textract: MagicMock) -> None:
    """Missing geometry shows up as null, not as a missing field."""
    textract.analyze_document.return_value = {
        "Blocks": [
            raw_kv("K1", "KEY", children=["W1"], values=["V1"]),
            raw_kv("V1", "VALUE", children=["W2"]),
            raw_word("W1", "Notes"),
            raw_word("W2", "none"),
        ]
    }
    data = client.get("/analyze/blank.png").json()

    assert data == [
        {"key": "Notes", "value": "none", "key_bounding_box": None, "value_bounding_box": None}
    ]


def test_display_returns_png_of_source_size(client: TestClient, s3: MagicMock) -> None:
    """GET /display/{name} streams a PNG with the source dimensions."""
    response = client.get("/display/intake.png")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    image = Image.open(io.BytesIO(response.content))
    assert image.size == (640, 480)
    s3.get_object.assert_called_once_with(Bucket="test-bucket", Key="intake.png")


def test_analysis_failure_maps_to_bad_gateway(client: TestClient, textract: MagicMock) -> None:
    """A Textract error fails the request with 502 and the AWS error code."""
    textract.analyze_document.side_effect = ClientError(
        {"Error": {"Code": "ThrottlingException", "Message": "Rate exceeded"}},
        "AnalyzeDocument",
    )

    response = client.get("/analyze/intake.png")

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "Bad Gateway"
    assert body["code"] == "ThrottlingException"


def test_malformed_analysis_maps_to_bad_gateway(client: TestClient, textract: MagicMock) -> None:
    """Blocks that cannot be converted are an upstream fault (502), not a 400."""
    textract.analyze_document.return_value = {"Blocks": ["not-a-block"]}

    response = client.get("/analyze/intake.png")

    assert response.status_code == 502
    assert response.json()["error"] == "Bad Gateway"


def test_missing_image_maps_to_bad_gateway(client: TestClient, s3: MagicMock) -> None:
    """An S3 NoSuchKey on /display is an upstream failure (502)."""
    s3.get_object.side_effect = ClientError(
        {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
        "GetObject",
    )

    response = client.get("/display/ghost.png")

    assert response.status_code == 502
    assert response.json()["code"] == "NoSuchKey"


def test_undecodable_image_maps_to_422(client: TestClient, s3: MagicMock) -> None:
    """Bytes that are not an image fail only the display path, with 422."""
    s3.get_object.side_effect = lambda **_: {"Body": io.BytesIO(b"%PDF-1.4 not a raster")}

    display = client.get("/display/intake.png")
    assert display.status_code == 422
    assert display.json()["error"] == "Unprocessable Image"

    # Extraction never touches the image bytes.
    assert client.get("/analyze/intake.png").status_code == 200


def test_oversized_image_maps_to_422(client: TestClient, s3: MagicMock) -> None:
    """An image past the decompression-bomb limit is refused like any undecodable one."""
    s3.get_object.side_effect = lambda **_: {"Body": io.BytesIO(oversized_png())}

    response = client.get("/display/huge.png")

    assert response.status_code == 422
    assert response.json()["error"] == "Unprocessable Image"
