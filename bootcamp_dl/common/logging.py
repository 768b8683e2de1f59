"""Logging configuration for the Boot Camp fetcher."""

from __future__ import annotations

import logging
import sys
from typing import TextIO


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "bootcamp_dl",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Module loggers (bootcamp_dl.*) propagate into it. Calling again only
    adjusts the level, so the CLI can switch to DEBUG after import.

    Args:
        level: Logging level (default INFO).
        module_name: Name for the logger instance.
        stream: Output stream (default stdout, shared with the progress line).

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)

    return logger
