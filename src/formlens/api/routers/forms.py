"""
API Routes for form extraction.

Endpoints
---------
- `GET /analyze/{image_name}`: pairs in reading order, as JSON.
- `GET /display/{image_name}`: the source image with pairs drawn on it, as PNG.

Design Decisions
----------------
- **Sync handlers**: the boto3 calls block, so the handlers are plain `def`
  and FastAPI runs them in its thread pool.
- **Request-scoped handles**: collaborators come from `app.state` through a
  dependency; handlers hold no module-level clients.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from formlens.aws.clients import FormServices
from formlens.core.contracts.pair import KeyValuePair
from formlens.pipelines.form_extraction import analyze_image, display_image
from formlens.render.annotate import LabelFont

router = APIRouter(tags=["Forms"])


def get_services(request: Request) -> FormServices:
    """Return the collaborator bundle the application was built with."""
    services: FormServices = request.app.state.services
    return services


def get_label_font(request: Request) -> LabelFont:
    """Return the label font loaded at application start."""
    font: LabelFont = request.app.state.label_font
    return font


ServicesDep = Annotated[FormServices, Depends(get_services)]
FontDep = Annotated[LabelFont, Depends(get_label_font)]


@router.get(
    "/analyze/{image_name}",
    response_model=list[KeyValuePair],
    summary="Extract key/value pairs from an image",
)
def analyze(image_name: str, services: ServicesDep) -> list[KeyValuePair]:
    """Analyze `image_name` and return its form fields in reading order."""
    return analyze_image(image_name, services.analyzer)


@router.get(
    "/display/{image_name}",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    summary="Render key/value boxes onto an image",
)
def display(image_name: str, services: ServicesDep, font: FontDep) -> Response:
    """Return `image_name` as PNG with key boxes in blue and value boxes in red."""
    png = display_image(image_name, services.analyzer, services.images, font=font)
    return Response(content=png, media_type="image/png")


__all__ = ["router", "get_services", "get_label_font"]
