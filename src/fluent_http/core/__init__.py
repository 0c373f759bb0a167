"""Core fluent-http модули."""

from .config import (
    Part,
    RetryPolicy,
    RequestSpec,
    RequestExtras,
    ClientConfig,
    DEFAULT_TIMEOUT,
)
from .exceptions import (
    HTTPClientError,
    ConnectionFailure,
    RequestFailure,
    UnknownFailure,
    ConfigurationError,
    classify_transport_exception,
)
from .options import build_options
from .response import Response
from .transport import Transport, RequestsTransport, to_requests_kwargs
from .dispatcher import RetryLoop
from .http_client import HTTPClient
from .settings import ClientSettings, load_from_env, get_env_file_path

__all__ = [
    # Config
    "Part",
    "RetryPolicy",
    "RequestSpec",
    "RequestExtras",
    "ClientConfig",
    "DEFAULT_TIMEOUT",
    "ClientSettings",
    "load_from_env",
    "get_env_file_path",
    # Core
    "HTTPClient",
    "Response",
    "RetryLoop",
    "build_options",
    "Transport",
    "RequestsTransport",
    "to_requests_kwargs",
    # Exceptions
    "HTTPClientError",
    "ConnectionFailure",
    "RequestFailure",
    "UnknownFailure",
    "ConfigurationError",
    "classify_transport_exception",
]
