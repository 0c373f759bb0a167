"""
Настройки логирования цикла попыток.

Значения обычно приходят строками (из FLUENT_HTTP_LOG_* или из кода),
поэтому LoggingConfig сам приводит их к enum при создании.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        """Числовой уровень stdlib logging."""
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и в каком виде RequestLogger пишет события запросов.

    Attributes:
        level: Минимальный уровень (строка или LogLevel)
        format: json, text или colored (строка или LogFormat)
        enable_console: Писать в stdout
        enable_file: Писать в файл с ротацией
        file_path: Путь к файлу (обязателен при enable_file=True)
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        enable_correlation_id: Добавлять correlation_id логического запроса
        extra_fields: Статические поля каждой записи (service, env, ...)

    Example:
        >>> config = LoggingConfig.create(level="debug", format="json")
        >>> config.level
        <LogLevel.DEBUG: 'DEBUG'>
    """

    level: Union[LogLevel, str] = LogLevel.INFO
    format: Union[LogFormat, str] = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Привести строки к enum и проверить файловые настройки."""
        if not isinstance(self.level, LogLevel):
            object.__setattr__(self, 'level', LogLevel(self.level.upper()))
        if not isinstance(self.format, LogFormat):
            object.__setattr__(self, 'format', LogFormat(self.format.lower()))
        object.__setattr__(self, 'extra_fields', dict(self.extra_fields or {}))

        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @classmethod
    def create(cls, level: str = "INFO", format: str = "text", **kwargs: Any) -> "LoggingConfig":
        """
        Создать конфиг из строковых значений.

        Raises:
            ValueError: неизвестный уровень или формат
        """
        return cls(level=level, format=format, **kwargs)
