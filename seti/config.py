"""
Runtime configuration read from environment variables.
"""

from __future__ import annotations
import logging
import os

SETI_ENV = os.getenv("SETI_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SETI_LOG_LEVEL = os.getenv("SETI_LOG_LEVEL", "INFO")
SETI_CARDS_PATH = os.getenv("SETI_CARDS_PATH")
SETI_SESSION_TTL = int(os.getenv("SETI_SESSION_TTL", "3600"))

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for CLI and server entry points."""
    logging.basicConfig(
        level=getattr(logging, (level or SETI_LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
