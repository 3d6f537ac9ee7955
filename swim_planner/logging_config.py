"""Logging setup for the Swim Planner API.

Application records go to the console, ``app.log`` and (errors only)
``error.log``. HTTP request lines go to the ``swim_planner.access`` logger,
which writes ``access.log`` in a compact access-log format and does not
propagate to the root handlers.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from swim_planner.config import get_settings

ACCESS_LOGGER = "swim_planner.access"
APP_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ACCESS_FORMAT = '%(asctime)s %(client)s "%(method)s %(path)s" %(status)d %(elapsed_ms).1fms'

_configured_dir: Path | None = None


def build_logging_config(log_dir: Path, level: str) -> dict:
    """Return the ``dictConfig`` mapping for the given directory and level."""

    def file_handler(filename: str, formatter: str, handler_level: str) -> dict:
        return {
            "class": "logging.FileHandler",
            "filename": str(log_dir / filename),
            "encoding": "utf-8",
            "formatter": formatter,
            "level": handler_level,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": APP_FORMAT},
            "access": {"format": ACCESS_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": file_handler("app.log", "standard", level),
            "errors": file_handler("error.log", "standard", "ERROR"),
            "access": file_handler("access.log", "access", "INFO"),
        },
        "loggers": {
            ACCESS_LOGGER: {
                "level": "INFO",
                "handlers": ["access"],
                "propagate": False,
            },
        },
        "root": {
            "level": level,
            "handlers": ["console", "file", "errors"],
        },
    }


def configure_logging() -> None:
    """Apply the logging configuration once per process."""

    global _configured_dir
    if _configured_dir is not None:
        return

    try:
        settings = get_settings()
        log_dir, level = settings.log_dir, settings.log_level
    except ValidationError:
        # Startup reports the missing credential itself; log to the defaults meanwhile.
        log_dir, level = Path("logs"), "INFO"
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(build_logging_config(log_dir, level))
    _configured_dir = log_dir
    logging.getLogger(__name__).debug("Logging configured | level=%s dir=%s", level, log_dir)


def access_logger() -> logging.Logger:
    return logging.getLogger(ACCESS_LOGGER)
