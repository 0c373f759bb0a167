"""
Цикл попыток одного логического запроса.

Решает, что делать с исходом каждой попытки:
- 2xx/3xx/4xx - вернуть ответ
- 5xx - повторить, пока есть попытки; на последней вернуть ответ
- ошибка транспорта - повторить, пока есть попытки; иначе ConnectionFailure / RequestFailure
- любая другая ошибка - повторить, пока есть попытки; иначе UnknownFailure

Пауза перед повтором выполняется только при sleep_ms > 0.
"""

import time
import uuid
from typing import Any, Callable, Mapping, Optional

import requests

from .config import RequestExtras, RequestSpec
from .exceptions import UnknownFailure, classify_transport_exception, underlying_code
from .logging import RequestLogger, clear_correlation_id, set_correlation_id
from .options import build_options
from .response import Response
from .transport import Transport
from ..utils.sanitizer import mask_url


def _error_code(error: BaseException) -> int:
    """Код исходной ошибки: .code если это int, иначе errno из цепочки, иначе 0."""
    code = getattr(error, 'code', None)
    if isinstance(code, int) and not isinstance(code, bool):
        return code
    return underlying_code(error)


class RetryLoop:
    """
    Выполняет логический запрос: одна или несколько попыток через транспорт.

    Не хранит per-call состояние: всё нужное приходит в run() по значению,
    поэтому один RetryLoop можно использовать из разных потоков.

    Examples:
        >>> loop = RetryLoop(RequestsTransport())
        >>> spec = RequestSpec().with_retry(2, sleep_ms=100)
        >>> response = loop.run("GET", "https://httpbin.org/status/503", spec, {})
        >>> response.status()  # после 3 попыток
        503
    """

    def __init__(
        self,
        transport: Transport,
        logger: Optional[RequestLogger] = None,
        sleep: Optional[Callable[[float], Any]] = None
    ):
        """
        Args:
            transport: Транспорт
            logger: Структурный логгер (опционально)
            sleep: Функция ожидания (по умолчанию time.sleep)
        """
        self._transport = transport
        self._logger = logger
        self._sleep = sleep

    @property
    def transport(self) -> Transport:
        return self._transport

    def _pause(self, spec: RequestSpec) -> None:
        if spec.retry.sleep_ms:
            (self._sleep or time.sleep)(spec.retry.sleep_seconds)

    def run(
        self,
        method: str,
        url: str,
        spec: RequestSpec,
        persistent: Mapping[str, Any],
        extras: Optional[RequestExtras] = None
    ) -> Response:
        """
        Выполнить логический запрос.

        Args:
            method: HTTP метод
            url: URL (относительный к base_url транспорта или абсолютный)
            spec: Per-call состояние (одинаковое для всех попыток)
            persistent: Постоянные опции клиента
            extras: query / data / as_json

        Returns:
            Обёртка ответа (в том числе 4xx и 5xx после последней попытки)

        Raises:
            ConnectionFailure: сетевая ошибка на последней попытке
            RequestFailure: прочая ошибка транспорта на последней попытке
            UnknownFailure: любая другая ошибка на последней попытке
        """
        method = method.upper()
        attempts = spec.retry.attempts
        safe_url = mask_url(url)
        correlation_id = str(uuid.uuid4())
        start_time = time.time()
        last_error: Optional[BaseException] = None

        if self._logger:
            set_correlation_id(correlation_id)
            self._logger.info(
                "Request started",
                method=method,
                url=safe_url,
                timeout=spec.timeout,
                max_attempts=attempts
            )

        try:
            for attempt in range(attempts):
                is_last = attempt == attempts - 1

                try:
                    # Options are rebuilt from the same spec on every attempt
                    options = build_options(method, spec, persistent, extras)
                    response = Response(self._transport.execute(method, url, options))

                except requests.RequestException as e:
                    last_error = e
                    if not is_last:
                        self._log_retry("Request error (will retry)", method, safe_url, attempt, attempts, spec, e)
                        self._pause(spec)
                        continue

                    error = classify_transport_exception(e)
                    self._log_failure(method, safe_url, attempt, attempts, start_time, error)
                    raise error from e

                except Exception as e:
                    last_error = e
                    if not is_last:
                        self._log_retry("Unexpected error (will retry)", method, safe_url, attempt, attempts, spec, e)
                        self._pause(spec)
                        continue

                    error = UnknownFailure(f"Unexpected error during request: {e}", _error_code(e))
                    self._log_failure(method, safe_url, attempt, attempts, start_time, error)
                    raise error from e

                if response.server_error() and not is_last:
                    self._log_retry("Server error (will retry)", method, safe_url, attempt, attempts, spec,
                                    status_code=response.status())
                    self._pause(spec)
                    continue

                if self._logger:
                    self._logger.info(
                        "Request completed",
                        method=method,
                        url=safe_url,
                        status_code=response.status(),
                        attempt=attempt + 1,
                        max_attempts=attempts,
                        duration_ms=round((time.time() - start_time) * 1000, 2)
                    )
                return response

            # Unreachable: the last attempt always returns or raises
            if last_error is not None:
                raise last_error
            raise UnknownFailure("Request loop finished without an outcome")

        finally:
            if self._logger:
                clear_correlation_id()

    def _log_retry(
        self,
        message: str,
        method: str,
        url: str,
        attempt: int,
        attempts: int,
        spec: RequestSpec,
        error: Optional[BaseException] = None,
        status_code: Optional[int] = None
    ) -> None:
        if not self._logger:
            return
        self._logger.warning(
            message,
            method=method,
            url=url,
            attempt=attempt + 1,
            max_attempts=attempts,
            wait_ms=spec.retry.sleep_ms,
            status_code=status_code,
            error=str(error) if error else None,
            error_type=type(error).__name__ if error else None
        )

    def _log_failure(
        self,
        method: str,
        url: str,
        attempt: int,
        attempts: int,
        start_time: float,
        error: Exception
    ) -> None:
        if not self._logger:
            return
        self._logger.error(
            "Request failed",
            method=method,
            url=url,
            error=str(error),
            error_type=type(error).__name__,
            attempt=attempt + 1,
            max_attempts=attempts,
            duration_ms=round((time.time() - start_time) * 1000, 2)
        )
