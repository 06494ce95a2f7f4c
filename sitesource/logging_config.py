"""
Logging configuration for ingestion runs.

JSON lines when ENV=production (for CI logs and aggregators), colored
human-readable output otherwise. The requested level applies to the
sitesource loggers and the entry script; other libraries stay at WARNING.

Usage:
    from sitesource.logging_config import setup_logging
    setup_logging()  # Call once at startup
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

PACKAGE_LOGGER = "sitesource"
# Loggers that follow the requested level: the package and the entry script
APP_LOGGERS = (PACKAGE_LOGGER, "__main__")
LIBRARY_LEVEL = "WARNING"


class JSONFormatter(logging.Formatter):
    """
    Format log records as one JSON object per line.

    Output includes timestamp, level, logger, message, module, function and
    line, plus the exception and any `extra={}` fields when present.
    Failed runs also report the file the SourceException points at.
    """

    # Standard LogRecord attributes, never copied as extra fields
    RESERVED_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "asctime",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            source_path = getattr(record.exc_info[1], "path", None)
            if source_path:
                log_data["source_path"] = source_path

        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """
    Human-readable colored formatter for terminals.

    Logger names drop the package prefix (`ingest.pipeline` rather than
    `sitesource.ingest.pipeline`).
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        reset = self.RESET if color else ""
        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            record.name = name[len(PACKAGE_LOGGER) + 1 :]
        try:
            return f"{color}{super().format(record)}{reset}"
        finally:
            record.name = name


def setup_logging(env: Optional[str] = None, log_level: Optional[str] = None) -> None:
    """
    Configure logging for the process.

    Args:
        env: "production" selects JSON output. Defaults to the ENV variable.
        log_level: Level name for the sitesource loggers. Defaults to
            LOG_LEVEL, then INFO.
    """
    env = env or os.getenv("ENV", "development")
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    if log_level not in VALID_LEVELS:
        log_level = "INFO"

    # Clear any existing handlers (important for testing)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(LIBRARY_LEVEL)
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if env == "production":
        formatter = JSONFormatter()
    else:
        formatter = ColoredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={'JSON' if env == 'production' else 'colored'}"
    )
