"""Logging configuration with JSON formatting."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from movies_api.config import settings


class JSONFormatter(logging.Formatter):
    """
    Formatter that renders each log record as a single JSON object.

    Fields:
    - timestamp: ISO 8601 timestamp in UTC
    - level / logger / message
    - service: configured service name
    - correlation_id: request correlation ID (if passed via extra)
    - keys of the `context` dict passed via extra, flattened in
    - exception: formatted traceback when exc_info is set
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": settings.service_name,
            "message": record.getMessage(),
        }

        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id

        if hasattr(record, "context"):
            log_data.update(record.context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno == logging.DEBUG:
            log_data["file"] = record.pathname
            log_data["line"] = record.lineno
            log_data["function"] = record.funcName

        return json.dumps(log_data, default=str)


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger to emit structured JSON to stdout.

    Args:
        level: Log level name; defaults to the LOG_LEVEL setting
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    # botocore is chatty at INFO
    logging.getLogger("botocore").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("aiobotocore").setLevel(max(log_level, logging.WARNING))

    root_logger.info(
        "Logging configured",
        extra={"context": {"log_level": level_name}},
    )


def get_logger(name: str) -> logging.Logger:
    """Return the named logger (typically called with __name__)."""
    return logging.getLogger(name)
