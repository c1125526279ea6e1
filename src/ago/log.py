"""Logging setup for the ago command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER: RichHandler | None = None


def configure_logging(level: str) -> logging.Logger:
    """Route ``ago`` log records to stderr through a single Rich handler.

    Repeated calls replace the handler installed by the previous call.

    Args:
        level: Level name such as ``"WARNING"`` or ``"DEBUG"``.

    Returns:
        logging.Logger: The configured package logger.
    """
    global _HANDLER

    logger = logging.getLogger("ago")
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)

    _HANDLER = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    _HANDLER.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_HANDLER)
    logger.setLevel(level)
    return logger


__all__ = ["configure_logging"]
