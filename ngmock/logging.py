"""Logging utilities for ngmock commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "ngmock"
_MAX_PATH_WIDTH = 75


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the ngmock hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the ngmock logger with console output and an optional file sink.

    Verbose runs log at DEBUG and include the emitting component in console
    lines, which makes per-class diagnostics easier to attribute.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not double-log.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_format = (
        "[ngmock] %(levelname)s %(name)s: %(message)s"
        if verbose
        else "[ngmock] %(levelname)s %(message)s"
    )
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(console_format))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def shorten_path(path: str | Path) -> str:
    """Abbreviate long paths for console messages, keeping head and tail."""
    text = str(path)
    if len(text) > _MAX_PATH_WIDTH:
        return f"{text[:30]}../..{text[-40:]}"
    return text


__all__ = ["configure_logging", "get_logger", "shorten_path"]
