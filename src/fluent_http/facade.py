"""
Stateless module-level helpers.

Every call builds a fresh HTTPClient, so nothing leaks between calls:

    >>> from fluent_http import facade as http
    >>> http.get("https://httpbin.org/get", {"foo": "bar"}).json()["args"]
    {'foo': 'bar'}
    >>> http.with_token("abc").retry(2, 100).json("https://httpbin.org/post", {"a": 1})

Verb helpers close their client after the response is read. Chain starters
return a client that closes itself after its first request; close it
explicitly if it is never sent.
"""

from typing import Any, Mapping, Optional, Union

from .core.http_client import HTTPClient
from .core.response import Response


def client(options: Optional[Mapping[str, Any]] = None) -> HTTPClient:
    """Fresh client."""
    return HTTPClient(options)


# ==================== Chain starters ====================

def with_headers(headers: Mapping[str, str]) -> HTTPClient:
    return HTTPClient(autoclose=True).with_headers(headers)


def with_proxy(proxy: Optional[str]) -> HTTPClient:
    return HTTPClient(autoclose=True).with_proxy(proxy)


def with_token(token: str, type: str = "Bearer") -> HTTPClient:
    return HTTPClient(autoclose=True).with_token(token, type)


def with_body(content: Union[str, bytes], content_type: str = "text/plain") -> HTTPClient:
    return HTTPClient(autoclose=True).with_body(content, content_type)


def attach(name: str, contents: Any, filename: Optional[str] = None) -> HTTPClient:
    return HTTPClient(autoclose=True).attach(name, contents, filename)


def timeout(seconds: Optional[float]) -> HTTPClient:
    return HTTPClient(autoclose=True).timeout(seconds)


def retry(times: int, sleep_ms: int = 0) -> HTTPClient:
    return HTTPClient(autoclose=True).retry(times, sleep_ms)


def with_options(options: Mapping[str, Any]) -> HTTPClient:
    return HTTPClient(options, autoclose=True)


# ==================== One-shot verbs ====================

def get(url: str, query: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.get(url, query)


def post(url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.post(url, data)


def json(url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.json(url, data)


def put(url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.put(url, data)


def patch(url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.patch(url, data)


def delete(url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
    with HTTPClient() as c:
        return c.delete(url, data)
