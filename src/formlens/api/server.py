"""
ASGI Entry Point for the formlens API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It proactively loads environment variables from `.env` so AWS credentials and
formlens settings are available before the application factory runs.

Usage
-----
Run via the console script:
    $ formlens-server

Or via uvicorn directly:
    $ uvicorn formlens.api.server:app --port 3001
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from formlens.api.app import create_app
from formlens.core.settings import get_logger, load_settings

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #

# Load .env BEFORE the settings cache is rebuilt and the factory runs.
load_dotenv(dotenv_path=Path(".env"))
load_settings.cache_clear()

logger = get_logger(__name__)

# Factory invocation
app = create_app()


def main() -> None:
    """Run the API server on the configured host and port."""
    cfg = load_settings()
    logger.info("Listening on %s:%d (bucket=%s)", cfg.host, cfg.port, cfg.s3_bucket)

    uvicorn.run(
        "formlens.api.server:app",
        host=cfg.host,
        port=cfg.port,
        reload=cfg.is_dev,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    main()
