"""Logging setup shared by scripts and tests."""

import logging

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root handler and return the package logger."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, level_name, logging.INFO),
    )
    return logging.getLogger("vault")
