"""Logging helpers for the project."""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_logger(name: str = "rfidsense", level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Return a configured :class:`logging.Logger` instance.

    Only one ``StreamHandler`` is ever attached to a given logger, so calling
    this repeatedly (for instance once per CLI invocation) does not duplicate
    output.
    """

    logger = logging.getLogger(name)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
