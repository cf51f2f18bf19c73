"""
Structured logging configuration for yfkit.
Provides JSON logging for services and human-readable logging for the CLI.
"""

import json
import sys
from typing import Any, Optional

from loguru import logger

from yfkit.core.config import settings


def json_formatter(record: dict[str, Any]) -> str:
    """
    Format log records as one JSON object per line.
    """
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    # Bound context (symbol, endpoint, ...) goes next to the standard keys
    if record.get("extra"):
        for key, value in record["extra"].items():
            if key not in log_entry:
                log_entry[key] = value

    # The returned string is itself a format template, so braces are escaped
    return json.dumps(log_entry, default=str).replace("{", "{{").replace("}", "}}") + "\n"


def human_formatter(record: dict[str, Any]) -> str:
    """
    Format log records for human readability in development.
    """
    return (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>\n"
    )


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to the LOG_LEVEL setting.
        json_output: Force JSON output. If None, uses LOG_FORMAT == "json".
    """
    logger.remove()

    level = level or settings.log_level
    if json_output is None:
        json_output = settings.log_format.lower() == "json"

    if json_output:
        logger.add(
            sys.stderr,
            format=json_formatter,
            level=level,
            serialize=False,
        )
    else:
        logger.add(
            sys.stderr,
            format=human_formatter,
            level=level,
            colorize=True,
        )

    logger.debug(f"Logging configured: level={level}, json={json_output}")


def get_logger(name: Optional[str] = None, **context: Any):
    """
    Get a logger instance with optional context binding.

    Args:
        name: Optional logger name for context
        **context: Extra key/value pairs bound to every record

    Returns:
        Logger instance
    """
    if name:
        context["logger_name"] = name
    if context:
        return logger.bind(**context)
    return logger
