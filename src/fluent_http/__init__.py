"""fluent-http - chainable HTTP client on top of requests."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_client import HTTPClient
from .core.response import Response
from .core.config import (
    ClientConfig,
    RequestSpec,
    RequestExtras,
    RetryPolicy,
    Part,
)
from .core.exceptions import (
    HTTPClientError,
    ConnectionFailure,
    RequestFailure,
    UnknownFailure,
    ConfigurationError,
)
from .core.settings import load_from_env
from .core.logging import LoggingConfig
from . import facade

# Users configure logging themselves via logging.getLogger('fluent_http')
logging.getLogger('fluent_http').addHandler(logging.NullHandler())

try:
    __version__ = version("fluent-http")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "HTTPClient",
    "Response",
    "facade",

    # Config
    "ClientConfig",
    "RequestSpec",
    "RequestExtras",
    "RetryPolicy",
    "Part",
    "LoggingConfig",
    "load_from_env",

    # Exceptions
    "HTTPClientError",
    "ConnectionFailure",
    "RequestFailure",
    "UnknownFailure",
    "ConfigurationError",

    # Version
    "__version__",
]
