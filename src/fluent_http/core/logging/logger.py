"""
Structured request logger.

Wraps a stdlib logger, wires handlers/formatters/filters from LoggingConfig
and masks sensitive values in every structured field.
"""

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from .config import LoggingConfig
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter
from ...utils.sanitizer import mask_sensitive_data


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[List[logging.Filter]] = None
) -> logging.StreamHandler:
    """Create stdout handler."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or []:
        handler.addFilter(f)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    filters: Optional[List[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Create rotating file handler, creating the parent directory if needed.

    File rotation:
        app.log       <- current
        app.log.1     <- previous
        ...
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or []:
        handler.addFilter(f)
    return handler


class RequestLogger:
    """
    Logger used by the retry loop.

    Example:
        >>> logger = RequestLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.info("Request started", method="GET", url="https://httpbin.org/get")
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "fluent_http.requests"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self.config.level.numeric

        # Per-instance child: two clients on one host never share handlers
        self._logger = logging.getLogger(f"{name}.{uuid.uuid4().hex[:8]}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            finally:
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self) -> 'RequestLogger':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
