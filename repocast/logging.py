"""Logging setup shared by the CLI, the service and pipeline components.

Component loggers live under the ``repocast`` hierarchy (``repocast.citations.
pipeline``, ``repocast.analysis.indexing``...). Console output names the
component without the package prefix so progress lines stay short.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

ROOT_LOGGER = "repocast"
CONSOLE_FORMAT = "[repocast] %(levelname)s %(component)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"

# Libraries whose INFO chatter would drown out pipeline progress.
NOISY_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


class ComponentFormatter(logging.Formatter):
    """Adds a ``component`` field: the logger name relative to ``repocast``."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name == ROOT_LOGGER:
            record.component = "main"
        elif name.startswith(ROOT_LOGGER + "."):
            record.component = name[len(ROOT_LOGGER) + 1 :]
        else:
            record.component = name
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for a repocast component, e.g. ``get_logger("orchestrator")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Install console (and optional file) handlers on the ``repocast`` logger.

    Calling this again replaces the previous handlers, so the CLI and the
    service can both configure logging in one process. Loggers named in
    ``quiet`` are raised to WARNING unless ``verbose`` is set.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(ComponentFormatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger"]
