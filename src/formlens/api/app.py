"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS for browser access to the PNG/JSON endpoints.
2.  **Exception Handling**: Global handlers so every failure returns structured JSON.
3.  **Routing**: Mounting the forms router and the health probe.
4.  **Collaborators**: Attaching the Textract/S3 handles and the label font to `app.state`.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (each test builds an app around in-memory fakes).
-   Configuration injection (the collaborator bundle is a parameter, not a global).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formlens import __version__
from formlens.api.routers import forms
from formlens.aws.clients import FormServices
from formlens.core.errors import ImageDecodeError, UpstreamError
from formlens.core.settings import get_logger, load_settings
from formlens.render.annotate import load_label_font

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ASGI Lifespan context manager.

    Nothing is opened here (boto3 clients are created with the app); the hook
    only reports startup/shutdown.
    """
    logger.info("formlens API starting up (environment=%s)", load_settings().environment)
    yield
    logger.info("formlens API shutting down")


def create_app(services: FormServices | None = None) -> FastAPI:
    """
    Construct and configure the formlens FastAPI application.

    Parameters
    ----------
    services:
        Collaborator handles used by every request. When omitted, boto3-backed
        services are built from the current settings.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="formlens API",
        description="Form key/value extraction and annotation",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    services = services if services is not None else FormServices.from_settings()
    app.state.services = services
    app.state.label_font = load_label_font(services.label_font_path)

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this to specific domains.
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions still return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ImageDecodeError)
    async def image_decode_error_handler(request: Request, exc: ImageDecodeError) -> JSONResponse:
        """The stored object is not a readable image: 422 Unprocessable Entity."""
        logger.warning("Image decode failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={
                "error": "Unprocessable Image",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        """An AWS collaborator failed: 502 Bad Gateway."""
        logger.error("Upstream failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=502,
            content={
                "error": "Bad Gateway",
                "detail": str(exc),
                "code": exc.error_code,
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(forms.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
