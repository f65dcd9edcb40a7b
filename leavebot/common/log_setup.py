"""Logging setup shared by the API process."""

from __future__ import annotations

import logging

from leavebot.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging at ``level`` (defaults to settings.LOG_LEVEL)."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
