"""Logging configuration for pagetop.

The terminal belongs to the dashboard while it runs, so records go either to
a file or to the Textual devtools console (`textual console`).
"""

import logging
from pathlib import Path

from textual.logging import TextualHandler

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", log_file: str | Path | None = None) -> logging.Handler:
    """
    Attach a single handler to the "pagetop" logger.

    Args:
        level: Logging level name.
        log_file: Append to this file instead of the devtools console.

    Returns:
        The installed handler.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("pagetop")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return handler
