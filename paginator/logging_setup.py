"""Process-wide logging for the list service.

One stdout handler on the root logger; the ``paginator`` package logs at the
configured level while uvicorn's own access log is quietened because
``paginator.http.request_log`` already emits one line per request.
"""
from __future__ import annotations
import logging
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def _dict_config(level: str) -> dict:
    console = {"handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
        "loggers": {
            "paginator": {"level": level, **console},
            "uvicorn": {"level": "INFO", **console},
            "uvicorn.error": {"level": "INFO", **console},
            "uvicorn.access": {"level": "WARNING", **console},
        },
    }


def configure_logging(level: str = "INFO") -> None:
    """Install the logging config unless the root logger is already set up.

    Reloaders and pytest's log capture attach their own handlers first; in
    that case leave them alone to avoid duplicate output.
    """
    if logging.getLogger().handlers:
        return
    dictConfig(_dict_config(str(level or "INFO").upper()))


__all__ = ["LOG_FORMAT", "configure_logging"]
