# src/fluent_http/core/http_client.py
from typing import Any, Callable, Mapping, Optional, Union, TYPE_CHECKING

from .config import ClientConfig, RequestExtras, RequestSpec
from .dispatcher import RetryLoop
from .response import Response
from .transport import RequestsTransport, Transport

if TYPE_CHECKING:
    from .logging import LoggingConfig, RequestLogger

TransportFactory = Callable[[Mapping[str, Any]], Transport]


class HTTPClient:
    """
    Fluent HTTP клиент.

    Цепочные методы копят per-call состояние (заголовки, токен, тело,
    multipart, таймаут, retry, прокси), глагол отправляет один логический
    запрос, после чего состояние сбрасывается к значениям по умолчанию.

    Features:
        - Приоритет тела: multipart > raw body > form > JSON
        - Повтор 5xx и ошибок транспорта с фиксированной паузой
        - Типизированные ошибки: ConnectionFailure / RequestFailure / UnknownFailure
        - Контекстный менеджер для освобождения сессии

    Не потокобезопасен для пересекающихся запросов: используйте отдельный
    клиент на поток или передавайте готовый RequestSpec в send().

    Example:
        >>> with HTTPClient({"base_url": "https://httpbin.org"}) as client:
        ...     response = client.with_token("abc").retry(2, 100).get("/get", {"page": 1})
        ...     print(response.status(), response["args"])
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        config: Optional[ClientConfig] = None,
        logging: Optional['LoggingConfig'] = None,
        transport_factory: Optional[TransportFactory] = None,
        sleep: Optional[Callable[[float], Any]] = None,
        autoclose: bool = False
    ):
        """
        Initialize HTTP client.

        Args:
            options: Постоянные опции транспорта (base_url, headers, verify, ...)
            config: Готовый ClientConfig (options и logging игнорируются)
            logging: Конфигурация логирования
            transport_factory: Фабрика транспорта (по умолчанию RequestsTransport)
            sleep: Функция ожидания между попытками (по умолчанию time.sleep)
            autoclose: Закрыть клиент после первого логического запроса
                       (используется facade для одноразовых клиентов)
        """
        if config is None:
            config = ClientConfig.create(options, logging=logging)

        self._config = config
        self._transport_factory: TransportFactory = transport_factory or RequestsTransport
        self._sleep = sleep
        self._autoclose = autoclose
        self._closed = False
        self._logger = self._create_logger(config)
        self._transport = self._transport_factory(config.options)
        self._loop = RetryLoop(self._transport, self._logger, sleep)
        self._spec = self._default_spec()

    @classmethod
    def from_env(cls, profile: Optional[str] = None, env_file: Optional[str] = None,
                 **overrides: Any) -> 'HTTPClient':
        """
        Создать клиент из переменных окружения FLUENT_HTTP_* и .env файла.

        Example:
            >>> client = HTTPClient.from_env(profile="production")
        """
        from .settings import load_from_env
        return cls(config=load_from_env(profile=profile, env_file=env_file, **overrides))

    @staticmethod
    def _create_logger(config: ClientConfig) -> Optional['RequestLogger']:
        if not config.logging:
            return None

        from urllib.parse import urlparse
        from .logging import RequestLogger

        # Use base_url domain in logger name for uniqueness
        name = "fluent_http.requests"
        if config.base_url:
            domain = urlparse(config.base_url).netloc
            if domain:
                name = f"fluent_http.{domain}"
        return RequestLogger(config=config.logging, name=name)

    def _default_spec(self) -> RequestSpec:
        return RequestSpec(timeout=self._config.reset_timeout)

    # ==================== Жизненный цикл ====================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self):
        """Закрыть транспорт и логгер. Повторный вызов ничего не делает."""
        if self._closed:
            return
        self._closed = True
        if self._logger is not None:
            self._logger.close()
        self._transport.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ==================== Цепочная конфигурация ====================

    def with_headers(self, headers: Mapping[str, str]) -> 'HTTPClient':
        """Добавить заголовки (объединение, последнее значение выигрывает)."""
        self._spec = self._spec.with_headers(headers)
        return self

    def with_proxy(self, proxy: Optional[str]) -> 'HTTPClient':
        self._spec = self._spec.with_proxy(proxy)
        return self

    def with_token(self, token: str, type: str = "Bearer") -> 'HTTPClient':
        """Authorization: <type> <token>."""
        self._spec = self._spec.with_token(token, type)
        return self

    def with_body(self, content: Union[str, bytes], content_type: str = "text/plain") -> 'HTTPClient':
        """
        Сырое тело запроса и Content-Type (например, для бинарного файла).

        Имеет приоритет над data из глаголов, но не над multipart.
        """
        self._spec = self._spec.with_body(content, content_type)
        return self

    def attach(self, name: str, contents: Any, filename: Optional[str] = None) -> 'HTTPClient':
        """
        Добавить multipart поле (загрузка файлов).

        Args:
            name: Имя поля
            contents: Содержимое или file-like объект
            filename: Имя файла (опционально)
        """
        self._spec = self._spec.attach(name, contents, filename)
        return self

    def timeout(self, seconds: Optional[float]) -> 'HTTPClient':
        """Таймаут запроса (сек)."""
        self._spec = self._spec.with_timeout(seconds)
        return self

    def retry(self, times: int, sleep_ms: int = 0) -> 'HTTPClient':
        """
        Политика повторов.

        Args:
            times: Количество повторов (не включая первую попытку)
            sleep_ms: Пауза перед каждым повтором (мс)
        """
        self._spec = self._spec.with_retry(times, sleep_ms)
        return self

    def with_options(self, options: Mapping[str, Any]) -> 'HTTPClient':
        """
        Объединить постоянные опции и пересоздать транспорт.

        Example:
            >>> client.with_options({"base_url": "https://other.example.com", "verify": False})
        """
        config = self._config.with_options(options)
        # Old transport stays usable if the factory raises
        transport = self._transport_factory(config.options)

        previous_reset = self._config.reset_timeout
        old_transport = self._transport
        self._config = config
        self._transport = transport
        self._loop = RetryLoop(transport, self._logger, self._sleep)
        old_transport.close()

        if self._spec.timeout == previous_reset:
            self._spec = self._spec.with_timeout(config.reset_timeout)
        return self

    # ==================== HTTP глаголы ====================

    def get(self, url: str, query: Optional[Mapping[str, Any]] = None) -> Response:
        """GET с query параметрами."""
        return self.send("GET", url, RequestExtras(query=query))

    def post(self, url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
        """POST формы (application/x-www-form-urlencoded)."""
        return self.send("POST", url, RequestExtras(data=data, as_json=False))

    def json(self, url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
        """POST JSON."""
        return self.send("POST", url, RequestExtras(data=data, as_json=True))

    def put(self, url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
        """PUT JSON."""
        return self.send("PUT", url, RequestExtras(data=data, as_json=True))

    def patch(self, url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
        """PATCH JSON."""
        return self.send("PATCH", url, RequestExtras(data=data, as_json=True))

    def delete(self, url: str, data: Optional[Mapping[str, Any]] = None) -> Response:
        """DELETE (может нести JSON тело)."""
        return self.send("DELETE", url, RequestExtras(data=data, as_json=True))

    def send(
        self,
        method: str,
        url: str,
        extras: Optional[RequestExtras] = None,
        spec: Optional[RequestSpec] = None
    ) -> Response:
        """
        Отправить логический запрос.

        Args:
            method: HTTP метод
            url: URL (относительный к base_url или абсолютный)
            extras: query / data / as_json
            spec: Явный RequestSpec. Если передан, накопленное состояние
                  клиента не читается и не сбрасывается.

        Returns:
            Обёртка ответа

        Raises:
            ConnectionFailure, RequestFailure, UnknownFailure
        """
        explicit = spec is not None
        if spec is None:
            spec = self._spec
        try:
            return self._loop.run(method, url, spec, self._config.options, extras)
        finally:
            # Reset once per logical request, whatever the outcome
            if not explicit:
                self._spec = self._default_spec()
            if self._autoclose:
                self.close()

    # ==================== Свойства ====================

    @property
    def pending(self) -> RequestSpec:
        """Накопленное per-call состояние (read-only значение)."""
        return self._spec

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def options(self) -> Mapping[str, Any]:
        """Постоянные опции (read-only)."""
        return self._config.options

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def transport(self) -> Transport:
        return self._transport
