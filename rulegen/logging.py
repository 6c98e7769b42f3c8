"""Logging for rulegen: one ``rulegen`` hierarchy, one child logger per engine component."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

ROOT_LOGGER = "rulegen"
CONSOLE_FORMAT = "[rulegen] %(levelname)s %(component)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ComponentFilter(logging.Filter):
    """Expose the logger name below ``rulegen.`` as ``record.component``."""

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = ROOT_LOGGER + "."
        name = record.name
        record.component = name[len(prefix) :] if name.startswith(prefix) else name
        return True


def get_logger(component: str | None = None) -> logging.Logger:
    """Return ``rulegen.<component>``, e.g. ``rulegen.routing.matcher``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}" if component else ROOT_LOGGER)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send rulegen records to stderr and, when ``log_file`` is set, to a file.

    The console shows INFO and above unless ``verbose``. The file sink always
    records DEBUG, so routing scores and candidate lists are kept for later
    inspection. Handlers from a previous call are closed and replaced.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: List[logging.Handler] = [
        _prepared(logging.StreamHandler(), CONSOLE_FORMAT, console_level)
    ]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            _prepared(logging.FileHandler(path, encoding="utf-8"), FILE_FORMAT, logging.DEBUG)
        )
    for handler in handlers:
        logger.addHandler(handler)
    return logger


def _prepared(handler: logging.Handler, fmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(ComponentFilter())
    return handler


__all__ = ["ComponentFilter", "configure_logging", "get_logger"]
