"""
Structured Logging Setup

One logger per watcher component, all under the "acm_watch." prefix.
Logs go to stderr: stdout belongs to the CLI's config output.
JSON lines by default, plain text with ACM_LOG_FORMAT=text.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import TextIO

LOGGER_PREFIX = "acm_watch"

# Attributes every LogRecord has; anything else arrived through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "service"}

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, extra fields flattened in"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service", "unknown"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ServiceLoggerAdapter(logging.LoggerAdapter):
    """Stamps the component name on every record, keeping caller extras"""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the logger for one component.

    Args:
        service_name: Component name (e.g., "watch.codec", "cli")
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_format: JSON lines (True) or human readable text (False)
        stream: Where to write (defaults to the current sys.stderr)

    Returns:
        The configured logger
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    logger = logging.getLogger(f"{LOGGER_PREFIX}.{service_name}")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger


def get_service_logger(service_name: str) -> ServiceLoggerAdapter:
    """Logger adapter for a component, honouring ACM_LOG_LEVEL / ACM_LOG_FORMAT"""
    logger = setup_logging(
        service_name,
        log_level=os.environ.get("ACM_LOG_LEVEL", "INFO"),
        json_format=os.environ.get("ACM_LOG_FORMAT", "json").lower() == "json",
    )
    return ServiceLoggerAdapter(logger, {"service": service_name})


def set_log_level(log_level: str) -> None:
    """Change the level of every acm_watch logger already created"""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    for name, logger in logging.root.manager.loggerDict.items():
        if not name.startswith(f"{LOGGER_PREFIX}.") or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
