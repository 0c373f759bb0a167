# src/fluent_http/core/transport.py
"""
Transport capability on top of requests.

The retry loop only needs ``execute(method, url, options)``: it hands over a
resolved option set and gets back a ``requests.Response`` or a
``requests.RequestException``. 4xx/5xx responses are returned, not raised.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

# Keys read once when the transport is built
CONSTRUCTION_KEYS = frozenset({'base_url', 'verify', 'cert', 'allow_redirects'})

# Keys of the resolved option set understood by to_requests_kwargs
OPTION_KEYS = frozenset({
    'timeout', 'proxy', 'headers', 'multipart', 'body', 'query', 'json', 'form_params',
})


class Transport(ABC):
    """Narrow transport capability consumed by the retry loop."""

    @abstractmethod
    def execute(self, method: str, url: str, options: Mapping[str, Any]) -> requests.Response:
        """
        Send one attempt.

        Raises:
            requests.RequestException: on transport-level failure
        """
        pass

    def close(self) -> None:
        """Release resources (no-op by default)."""
        pass


def _multipart_to_files(parts: List[Mapping[str, Any]]) -> List[Tuple[str, Tuple[Optional[str], Any]]]:
    """
    Convert multipart parts to the ``files`` list accepted by requests.

    A part without filename becomes a plain form field inside the multipart body.
    """
    return [
        (part['name'], (part.get('filename'), part['contents']))
        for part in parts
    ]


def to_requests_kwargs(options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translate a resolved option set to ``requests.Session.request`` kwargs.

    Args:
        options: Resolved option set (timeout, proxy, headers, multipart,
                 body, query, json, form_params)

    Returns:
        Keyword arguments for requests

    Example:
        >>> to_requests_kwargs({"query": {"page": 1}, "form_params": {"a": "b"}})
        {'params': {'page': 1}, 'data': {'a': 'b'}}
    """
    kwargs: Dict[str, Any] = {}

    if options.get('timeout') is not None:
        kwargs['timeout'] = options['timeout']

    if options.get('proxy'):
        kwargs['proxies'] = {'http': options['proxy'], 'https': options['proxy']}

    if options.get('headers'):
        kwargs['headers'] = dict(options['headers'])

    if options.get('query'):
        kwargs['params'] = options['query']

    if options.get('multipart'):
        kwargs['files'] = _multipart_to_files(options['multipart'])
        if options.get('body') is not None:
            logger.warning("Raw body ignored: multipart parts take precedence")
    elif options.get('body') is not None:
        kwargs['data'] = options['body']
    elif options.get('form_params') is not None:
        kwargs['data'] = options['form_params']

    if options.get('json') is not None:
        kwargs['json'] = options['json']

    ignored = set(options) - OPTION_KEYS - CONSTRUCTION_KEYS
    if ignored:
        logger.debug("Ignoring unknown transport options: %s", sorted(ignored))

    return kwargs


class RequestsTransport(Transport):
    """
    Transport backed by a single ``requests.Session``.

    Construction options:
        base_url: Prefix for relative URLs
        verify: SSL verification (bool or CA bundle path)
        cert: Client certificate
        allow_redirects: Follow redirects (default True)

    Example:
        >>> transport = RequestsTransport({"base_url": "https://httpbin.org"})
        >>> raw = transport.execute("GET", "/get", {"timeout": 3})
        >>> transport.close()
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None):
        options = options or {}
        self._base_url: Optional[str] = options.get('base_url') or None
        if self._base_url:
            self._base_url = self._base_url.rstrip('/')
        self._allow_redirects = options.get('allow_redirects', True)

        self._session = requests.Session()
        if 'verify' in options:
            self._session.verify = options['verify']
        if options.get('cert') is not None:
            self._session.cert = options['cert']

    @property
    def base_url(self) -> Optional[str]:
        return self._base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def build_url(self, endpoint: str) -> str:
        """
        Build full URL from base_url and endpoint.

        Absolute URLs are returned unchanged.
        """
        if endpoint.startswith(("http://", "https://")) or not self._base_url:
            return endpoint
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    def execute(self, method: str, url: str, options: Mapping[str, Any]) -> requests.Response:
        return self._session.request(
            method=method,
            url=self.build_url(url),
            allow_redirects=self._allow_redirects,
            **to_requests_kwargs(options)
        )

    def close(self) -> None:
        self._session.close()
