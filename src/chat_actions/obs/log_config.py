"""Logging setup for the chat actions service.

Call `setup_logging()` once at application startup. The level comes from the
`LOG_LEVEL` environment variable unless passed explicitly.
"""

from __future__ import annotations

import logging
import os
import sys

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str | None = None) -> None:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()
    if level not in _VALID_LEVELS:
        level = "INFO"

    numeric_level = getattr(logging, level)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger("chat_actions").setLevel(numeric_level)
    if level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging configured at %s level", level)
