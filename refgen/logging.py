"""Logging helpers shared by the refgen generators."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "refgen"
_CONSOLE_FORMAT = "[refgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below the ``refgen`` namespace."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the refgen logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    return logger


def log_progress(
    logger: logging.Logger, index: int, total: int, message: str, *args: object
) -> None:
    """Emit a ``[index/total]`` progress line for long-running summarization."""
    logger.info("[%d/%d] " + message, index, total, *args)


__all__ = ["configure_logging", "get_logger", "log_progress"]
