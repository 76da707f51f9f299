"""Logging setup for the command-line and web entry points."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

LOGGER_NAME = "debt_calc"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class PackageStreamHandler(logging.StreamHandler):
    """Stream handler installed by ``configure_logging``."""


def configure_logging(level: str = "WARNING", json_output: bool = False) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling it again replaces the previous handler, so the CLI and the web app
    can both call it at startup.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, PackageStreamHandler):
            logger.removeHandler(handler)

    handler = PackageStreamHandler()
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger
