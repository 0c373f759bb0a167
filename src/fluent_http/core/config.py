"""
Конфигурация fluent-http.

Все значения immutable (frozen dataclasses): цепочные методы возвращают
новые экземпляры, поэтому RequestSpec можно передавать по значению между
потоками.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_TIMEOUT = 3.0

def _freeze_dict(d: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    Convert mapping to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MULTIPART
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class Part:
    """
    Одно поле multipart запроса.

    Args:
        name: Имя поля
        contents: Содержимое (str, bytes или file-like объект)
        filename: Имя файла (опционально)
    """
    name: str
    contents: Any
    filename: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        item = {'name': self.name, 'contents': self.contents}
        if self.filename:
            item['filename'] = self.filename
        return item

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY POLICY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryPolicy:
    """
    Политика повторов одного логического запроса.

    Args:
        times: Количество повторов (не включая первую попытку)
        sleep_ms: Пауза перед каждым повтором (мс); 0 = повтор сразу

    Examples:
        >>> RetryPolicy(times=2, sleep_ms=100).attempts
        3
    """
    times: int = 0
    sleep_ms: int = 0

    def __post_init__(self):
        """Валидация."""
        if self.times < 0:
            raise ValueError("retry times must be non-negative")
        if self.sleep_ms < 0:
            raise ValueError("retry sleep_ms must be non-negative")

    @property
    def attempts(self) -> int:
        """Общее число попыток (включая первую)."""
        return max(1, self.times + 1)

    @property
    def sleep_seconds(self) -> float:
        return self.sleep_ms / 1000.0

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST SPEC (per-call state)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestSpec:
    """
    Состояние одного логического запроса.

    Собирается цепочкой with_* методов, каждый из которых возвращает новый
    RequestSpec. Экземпляр никогда не меняется после создания.

    Args:
        headers: Заголовки запроса
        token: Токен авторизации (дублируется в Authorization)
        body: Сырое тело запроса
        multipart: Поля multipart в порядке добавления
        timeout: Таймаут (сек); None = не задан
        retry: Политика повторов
        proxy: Прокси (опционально)

    Examples:
        >>> spec = RequestSpec().with_token("abc").with_retry(2, sleep_ms=100)
        >>> spec.headers["Authorization"]
        'Bearer abc'
    """
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    token: Optional[str] = None
    body: Optional[Union[str, bytes]] = None
    multipart: Tuple[Part, ...] = ()
    timeout: Optional[float] = DEFAULT_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    proxy: Optional[str] = None

    def __post_init__(self):
        """Freeze headers and validate timeout."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))
        if not isinstance(self.multipart, tuple):
            object.__setattr__(self, 'multipart', tuple(self.multipart))
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def with_headers(self, headers: Mapping[str, str]) -> 'RequestSpec':
        """Новый spec с объединёнными заголовками (новые значения выигрывают)."""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_proxy(self, proxy: Optional[str]) -> 'RequestSpec':
        return replace(self, proxy=proxy)

    def with_token(self, token: str, type: str = "Bearer") -> 'RequestSpec':
        """Новый spec с токеном и заголовком Authorization: <type> <token>."""
        spec = self.with_headers({'Authorization': f"{type} {token}"})
        return replace(spec, token=token)

    def with_body(self, content: Union[str, bytes], content_type: str = "text/plain") -> 'RequestSpec':
        """Новый spec с сырым телом и Content-Type."""
        spec = self.with_headers({'Content-Type': content_type})
        return replace(spec, body=content)

    def attach(self, name: str, contents: Any, filename: Optional[str] = None) -> 'RequestSpec':
        """Новый spec с добавленным multipart полем."""
        return replace(self, multipart=self.multipart + (Part(name, contents, filename),))

    def with_timeout(self, seconds: Optional[float]) -> 'RequestSpec':
        return replace(self, timeout=seconds)

    def with_retry(self, times: int, sleep_ms: int = 0) -> 'RequestSpec':
        return replace(self, retry=RetryPolicy(times=int(times), sleep_ms=int(sleep_ms)))

    def is_default(self, default_timeout: Optional[float] = DEFAULT_TIMEOUT) -> bool:
        """Совпадает ли spec со свежим (как после reset)."""
        return self == RequestSpec(timeout=default_timeout)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST EXTRAS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestExtras:
    """
    Параметры конкретного HTTP глагола.

    Args:
        query: Query параметры URL
        data: Данные для формы / JSON / multipart
        as_json: Кодировать data как JSON
    """
    query: Optional[Mapping[str, Any]] = None
    data: Optional[Mapping[str, Any]] = None
    as_json: bool = False

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Постоянная конфигурация клиента.

    Args:
        options: Опции транспорта (base_url, headers, verify, cert,
                 allow_redirects, timeout, proxy, ...). Копируются в каждый
                 resolved option set как основа.
        default_timeout: Таймаут per-call состояния после reset (сек),
                         если в options нет 'timeout'
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ClientConfig.create({"base_url": "https://httpbin.org"})
        >>> config = config.with_options({"verify": False})
    """
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    default_timeout: Optional[float] = DEFAULT_TIMEOUT
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Freeze options."""
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, 'options', _freeze_dict(self.options))
        if self.default_timeout is not None and self.default_timeout <= 0:
            raise ValueError("default_timeout must be positive")
        timeout = self.options.get('timeout')
        if timeout is not None and timeout <= 0:
            raise ValueError("options['timeout'] must be positive")

    @classmethod
    def create(
        cls,
        options: Optional[Mapping[str, Any]] = None,
        default_timeout: Optional[float] = DEFAULT_TIMEOUT,
        logging: Optional['LoggingConfig'] = None,
        **kwargs: Any
    ) -> 'ClientConfig':
        """
        Удобный конструктор.

        Args:
            options: Опции транспорта
            default_timeout: Таймаут по умолчанию
            logging: Конфигурация логирования
            **kwargs: Дополнительные опции транспорта (объединяются с options)

        Examples:
            >>> ClientConfig.create(base_url="https://api.example.com", verify=False)
        """
        merged = dict(options or {})
        merged.update(kwargs)
        return cls(options=merged, default_timeout=default_timeout, logging=logging)

    @property
    def base_url(self) -> Optional[str]:
        return self.options.get('base_url')

    @property
    def reset_timeout(self) -> Optional[float]:
        """
        Таймаут per-call состояния после reset.

        Постоянная опция 'timeout' имеет приоритет над default_timeout.
        """
        return self.options.get('timeout', self.default_timeout)

    def with_options(self, options: Mapping[str, Any]) -> 'ClientConfig':
        """
        Создать новый конфиг с объединёнными опциями.

        Example:
            >>> new_config = config.with_options({"base_url": "https://other.example.com"})
        """
        merged = dict(self.options)
        merged.update(options)
        return replace(self, options=merged)
