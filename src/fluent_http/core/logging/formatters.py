"""
Log formatters: JSON, plain text and ANSI-colored text.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

# Attributes every LogRecord carries; anything else came in via ``extra``
_RECORD_FIELDS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'asctime', 'taskName',
})


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_FIELDS and not key.startswith('_')
    }


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Example output:
        {"timestamp": "2024-01-15T10:30:45.123000+00:00", "level": "INFO",
         "logger": "fluent_http", "message": "Request completed",
         "method": "GET", "status_code": 200}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_extra_fields(record))

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """
    Format: [timestamp] [level] [logger] message key=value ...
    """

    def __init__(self):
        super().__init__(
            fmt='[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def _append_extra(self, base_msg: str, record: logging.LogRecord) -> str:
        pairs: List[str] = [f"{key}={value}" for key, value in _extra_fields(record).items()]
        if pairs:
            base_msg += " " + " ".join(pairs)
        return base_msg

    def format(self, record: logging.LogRecord) -> str:
        return self._append_extra(super().format(record), record)


class ColoredFormatter(TextFormatter):
    """TextFormatter with the level name colorized for terminals."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def get_formatter(format_type: str) -> logging.Formatter:
    """
    Get formatter by name.

    Raises:
        ValueError: If format_type is unknown
    """
    formatters = {
        "json": JSONFormatter,
        "text": TextFormatter,
        "colored": ColoredFormatter,
    }

    formatter_class = formatters.get(format_type.lower())
    if not formatter_class:
        raise ValueError(
            f"Unknown format type: {format_type}. "
            f"Available: {', '.join(formatters.keys())}"
        )

    return formatter_class()
