# -*- coding: utf-8 -*-
"""
This module contains the logging helpers of the pylending package.

The package never installs handlers on import; applications call
setup_logging() when they want its records on the console.
"""
import json
import logging
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = 'pylending'

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        if hasattr(record, "loan_id"):
            log_data["loan_id"] = record.loan_id
        return json.dumps(log_data)


def setup_logging(level="INFO", format_type="standard"):
    """
    Send pylending log records to stdout.

    :param level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    :param format_type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level)
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def get_logger(name):
    """Get a logger with the given name (usually __name__)."""
    return logging.getLogger(name)
