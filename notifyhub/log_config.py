"""Logging configuration shared by the API process."""

from __future__ import annotations

import logging
from logging.config import dictConfig


def configure_logging(level: str = "INFO") -> None:
    """Install a console handler with a structured format on the root logger."""

    log_level = level.upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "level": log_level,
                }
            },
            "loggers": {
                "uvicorn": {"handlers": ["console"], "level": log_level, "propagate": False},
                "uvicorn.error": {"level": log_level, "propagate": True},
                "uvicorn.access": {"handlers": ["console"], "level": log_level, "propagate": False},
            },
            "root": {"handlers": ["console"], "level": log_level},
        }
    )
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)


__all__ = ["configure_logging"]
