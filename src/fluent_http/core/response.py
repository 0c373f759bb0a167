"""
Обёртка ответа: классификация статуса, ленивый JSON, заголовки, throw().
"""

from typing import Any, Dict, Optional

import requests

from .exceptions import RequestFailure

_UNSET = object()


class Response:
    """
    Обёртка над requests.Response.

    Основные методы:
    - body() - тело ответа как текст
    - json() - разобранный JSON (None если тело не JSON)
    - status() - HTTP статус
    - ok/successful/failed/client_error/server_error - классификация статуса
    - header/headers - доступ к заголовкам
    - throw() - RequestFailure для 4xx/5xx

    Поддерживает чтение по ключу поверх JSON: response["id"]. Записи нет.

    Example:
        >>> response = client.get("https://httpbin.org/get", {"foo": "bar"})
        >>> response.ok()
        True
        >>> response["args"]["foo"]
        'bar'
    """

    def __init__(self, response: requests.Response):
        self._raw = response
        self._decoded: Any = _UNSET

    def __repr__(self) -> str:
        return f"<Response [{self.status()}]>"

    @property
    def raw(self) -> requests.Response:
        """Исходный requests.Response (read-only)."""
        return self._raw

    def body(self) -> str:
        """Тело ответа как строка."""
        return self._raw.text

    def json(self) -> Any:
        """
        Разобрать тело как JSON.

        Результат кешируется. Битый или пустой JSON даёт None, исключений нет.
        """
        if self._decoded is _UNSET:
            try:
                self._decoded = self._raw.json()
            except ValueError:
                self._decoded = None
        return self._decoded

    def status(self) -> int:
        return self._raw.status_code

    def ok(self) -> bool:
        return 200 <= self.status() < 300

    def successful(self) -> bool:
        return self.ok()

    def failed(self) -> bool:
        return not self.successful()

    def client_error(self) -> bool:
        return 400 <= self.status() < 500

    def server_error(self) -> bool:
        return 500 <= self.status() < 600

    def header(self, name: str) -> Optional[str]:
        """
        Значение заголовка (без учёта регистра).

        Повторяющиеся заголовки уже склеены через ", " на уровне urllib3.

        Returns:
            Значение или None
        """
        return self._raw.headers.get(name)

    def headers(self) -> Dict[str, str]:
        return dict(self._raw.headers)

    def url(self) -> str:
        return self._raw.url

    def reason(self) -> str:
        return self._raw.reason

    def throw(self) -> 'Response':
        """
        Выбросить RequestFailure для 4xx/5xx, иначе вернуть self.

        Example:
            >>> data = client.get("/users/1").throw().json()

        Raises:
            RequestFailure: со статусом в .code и этим ответом в .response
        """
        if self.client_error() or self.server_error():
            raise RequestFailure(
                f"HTTP request failed with status {self.status()}",
                self.status(),
                self
            )
        return self

    # ==================== Доступ по ключу к JSON ====================

    def get(self, key: Any, default: Any = None) -> Any:
        data = self.json()
        if isinstance(data, dict):
            return data.get(key, default)
        if isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data):
            return data[key]
        return default

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    # __getitem__ never raises IndexError, so the legacy sequence protocol would loop forever
    __iter__ = None

    def __contains__(self, key: Any) -> bool:
        data = self.json()
        if isinstance(data, dict):
            return key in data
        return isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data)
