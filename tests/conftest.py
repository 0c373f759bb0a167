"""
Pytest configuration and fixtures for fluent-http tests.
"""

from typing import Any, Dict, List, Mapping, Tuple

import pytest
import requests
import responses as responses_lib

from fluent_http.core.http_client import HTTPClient
from fluent_http.core.logging.config import LoggingConfig
from fluent_http.core.logging.filters import clear_correlation_id
from fluent_http.core.transport import Transport


def make_raw_response(status: int = 200, body: str = "", headers: Dict[str, str] = None) -> requests.Response:
    """Build a requests.Response without touching the network."""
    raw = requests.Response()
    raw.status_code = status
    raw._content = body.encode("utf-8")
    raw.encoding = "utf-8"
    raw.url = "https://api.example.com/"
    raw.headers.update(headers or {})
    return raw


class RecordingTransport(Transport):
    """
    Fake transport that replays a scripted list of outcomes.

    Each outcome is either a requests.Response (returned) or an exception (raised).
    Every call is recorded as (method, url, options).
    """

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.closed = False

    def execute(self, method: str, url: str, options: Mapping[str, Any]) -> requests.Response:
        self.calls.append((method, url, dict(options)))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Stand-in for time.sleep that only records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def make_response():
    """Factory for offline requests.Response objects."""
    return make_raw_response


@pytest.fixture
def recording_transport():
    """RecordingTransport class for tests that drive RetryLoop directly."""
    return RecordingTransport


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def client(base_url, sleeper):
    """HTTP client backed by requests (mock with `mock_responses`)."""
    client = HTTPClient({"base_url": base_url}, sleep=sleeper)
    yield client
    client.close()


@pytest.fixture
def fake_client(sleeper):
    """
    Factory: client whose transport replays scripted outcomes.

    Usage:
        client, transport = fake_client([make_response(500), make_response(200)])
    """
    created = []

    def factory(outcomes: List[Any], options: Mapping[str, Any] = None):
        transport = RecordingTransport(outcomes)
        client = HTTPClient(options, transport_factory=lambda _opts: transport, sleep=sleeper)
        created.append(client)
        return client, transport

    yield factory

    for c in created:
        c.close()


@pytest.fixture
def logging_config_with_file(tmp_path):
    """LoggingConfig writing JSON into a temporary file."""
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(tmp_path / "requests.log")
    )
