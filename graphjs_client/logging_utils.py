from __future__ import annotations

import logging
import os

LOGGER_NAME = "graphjs_client"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call more than once; the level is updated but no second handler
    is added. ``GRAPHJS_DEBUG`` in the environment forces DEBUG.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if verbose or os.getenv("GRAPHJS_DEBUG") else logging.INFO

    if not any(getattr(h, "_graphjs_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._graphjs_handler = True
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
