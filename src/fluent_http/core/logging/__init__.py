"""
Logging system for fluent-http.

Example:
    >>> from fluent_http.core.logging import LoggingConfig
    >>> from fluent_http import HTTPClient
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="colored")
    >>> client = HTTPClient({"base_url": "https://httpbin.org"}, logging=config)
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import RequestLogger, create_console_handler, create_file_handler
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "RequestLogger",
    "create_console_handler",
    "create_file_handler",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
]
