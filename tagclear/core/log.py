"""Logging setup for the command-line entry points."""

from __future__ import annotations

import logging

from tagclear.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(name: str | None) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=resolve_level(level or get_settings().log_level), format=LOG_FORMAT)
