"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `FORMLENS_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    aws_region : str
        Region used for the Textract and S3 clients; maps from `AWS_REGION`.
    s3_bucket : str
        Bucket holding the source page images; maps from `FORMLENS_S3_BUCKET`.
    host, port :
        Listening address of the HTTP server; map from `FORMLENS_HOST` / `FORMLENS_PORT`.
    label_font_path : Optional[str]
        TrueType font used for box labels; maps from `FORMLENS_LABEL_FONT`.
        When unset, Pillow's bundled default font is used.
    """

    environment: EnvName = Field(default="dev", alias="FORMLENS_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    s3_bucket: str = Field(default="smartflow-dev", alias="FORMLENS_S3_BUCKET")
    host: str = Field(default="127.0.0.1", alias="FORMLENS_HOST")
    port: int = Field(default=3001, ge=1, le=65535, alias="FORMLENS_PORT")
    label_font_path: str | None = Field(default=None, alias="FORMLENS_LABEL_FONT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("FORMLENS_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "formlens") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
