"""
Unified logging setup.

- console (default) -> colourised RichHandler
- json              -> one JSON object per line for log shippers
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings, get_settings

ROOT_LOGGER_NAME = "friendlines"


def _console_handler() -> logging.Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    return handler


def setup_logging(settings: Settings | None = None, force: bool = False) -> None:
    """
    Attach a handler to the package logger and to uvicorn's loggers.

    Does nothing when handlers are already installed unless ``force`` is set.
    """
    settings = settings or get_settings()
    root = logging.getLogger(ROOT_LOGGER_NAME)

    if root.handlers and not force:
        return

    for h in list(root.handlers):
        root.removeHandler(h)

    level = settings.log_level.upper()
    handler = _json_handler() if settings.log_format.lower() == "json" else _console_handler()
    root.setLevel(level)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``friendlines`` namespace."""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
