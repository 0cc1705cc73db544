"""Logger hierarchy shared by the docctx library, CLI and service."""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "docctx"
_CONSOLE_FORMAT = "[docctx] %(levelname)s %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``docctx.<name>``, or the package logger when no name is given."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Send docctx records to stderr; stdout carries only command output.

    Library callers that never call this keep standard propagation to the
    root logger.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    # One handler per process, however many times main() runs.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["configure_logging", "get_logger"]
