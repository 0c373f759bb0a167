"""
Иерархия исключений fluent-http.

Классификация:
- ConnectionFailure - соединение не установлено или оборвано (DNS, refused, timeout)
- RequestFailure - HTTP обмен состоялся (полностью или частично), но признан ошибкой
- UnknownFailure - всё остальное, что вылетело из цикла попыток
"""

from typing import TYPE_CHECKING, Optional

import requests

if TYPE_CHECKING:
    from .response import Response

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientError(Exception):
    """
    Базовое исключение fluent-http.

    Args:
        message: Человекочитаемое сообщение
        code: HTTP статус (если известен), иначе код нижнего уровня, иначе 0
    """

    def __init__(self, message: str, code: int = 0):
        self.message = message
        self.code = code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code})"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# FAILURES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConnectionFailure(HTTPClientError):
    """
    Транспорт не смог установить или удержать соединение.

    Примеры:
    - Connection refused
    - DNS resolution failed
    - Connect/read timeout
    """
    pass

class RequestFailure(HTTPClientError):
    """
    HTTP обмен признан ошибкой.

    Выбрасывается после исчерпания попыток на транспортной ошибке с ответом,
    либо явно через Response.throw(). Ответ (если был) доступен в .response.

    Args:
        message: Сообщение
        code: HTTP статус или 0
        response: Обёртка ответа или None
    """

    def __init__(self, message: str, code: int = 0, response: Optional['Response'] = None):
        self.response = response
        super().__init__(message, code)

class UnknownFailure(HTTPClientError):
    """Любая другая ошибка внутри цикла попыток."""
    pass

class ConfigurationError(HTTPClientError):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def underlying_code(exc: BaseException) -> int:
    """
    Найти errno в цепочке исключений.

    requests заворачивает ошибки urllib3, которые в свою очередь заворачивают
    OSError. Идём по args / reason / __cause__ / __context__ пока не найдём errno.

    Returns:
        errno или 0
    """
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))

        errno = getattr(current, 'errno', None)
        if isinstance(errno, int) and errno:
            return errno

        stack.append(getattr(current, 'reason', None))
        stack.append(current.__cause__)
        stack.append(current.__context__)
        stack.extend(current.args)

    return 0

def classify_transport_exception(exc: requests.RequestException) -> HTTPClientError:
    """
    Конвертировать исключение requests в наше.

    Args:
        exc: Исключение из requests

    Returns:
        ConnectionFailure для сетевых ошибок и таймаутов,
        RequestFailure (с частичным ответом, если он есть) для остальных

    Examples:
        >>> err = classify_transport_exception(requests.exceptions.ConnectTimeout("boom"))
        >>> assert isinstance(err, ConnectionFailure)
    """
    # Lazy import to avoid circular dependency
    from .response import Response

    if isinstance(exc, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return ConnectionFailure(f"Connection failed: {exc}", underlying_code(exc))

    raw = getattr(exc, 'response', None)
    if raw is not None:
        response = Response(raw)
        return RequestFailure(f"HTTP request failed: {exc}", response.status(), response)

    return RequestFailure(f"HTTP request failed: {exc}", underlying_code(exc))
