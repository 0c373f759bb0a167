"""
Client configuration from environment variables and .env files.

Priority (highest to lowest):
1. **overrides passed to load_from_env
2. Environment variables (FLUENT_HTTP_*)
3. .env file (profile-specific or default)
4. Defaults

Example .env file:
    FLUENT_HTTP_BASE_URL=https://api.example.com
    FLUENT_HTTP_TIMEOUT=5
    FLUENT_HTTP_VERIFY_SSL=true
    FLUENT_HTTP_HEADERS={"Accept": "application/json"}
    FLUENT_HTTP_LOG_ENABLED=true
    FLUENT_HTTP_LOG_FORMAT=json
"""

import os
from typing import Any, Dict, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import ClientConfig
from .exceptions import ConfigurationError
from .logging.config import LoggingConfig

ENV_PREFIX = "FLUENT_HTTP_"
PROFILE_ENV_VAR = "FLUENT_HTTP_ENV"


class ClientSettings(BaseSettings):
    """
    Validated client settings.

    Usage:
        >>> settings = ClientSettings()
        >>> settings.timeout
        3.0
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Prefix for relative request URLs")
    timeout: float = Field(default=3.0, gt=0, description="Per-call timeout in seconds")
    verify_ssl: bool = Field(default=True)
    allow_redirects: bool = Field(default=True)
    proxy: Optional[str] = Field(default=None, description="Proxy applied to every request")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers (JSON object)")

    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip('/')

    def to_options(self) -> Dict[str, Any]:
        """Persistent transport options for ClientConfig."""
        options: Dict[str, Any] = {
            'verify': self.verify_ssl,
            'allow_redirects': self.allow_redirects,
        }
        if self.base_url:
            options['base_url'] = self.base_url
        if self.proxy:
            options['proxy'] = self.proxy
        if self.headers:
            options['headers'] = dict(self.headers)
        return options

    def to_logging_config(self) -> Optional[LoggingConfig]:
        if not self.log_enabled:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_file=bool(self.log_file_path),
            file_path=self.log_file_path,
        )


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    .env file path for a profile.

    Example:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)  # FLUENT_HTTP_ENV not set
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)

    if not profile:
        return ".env"

    return f".env.{profile}"


def load_from_env(
    profile: Optional[str] = None,
    env_file: Optional[str] = None,
    **overrides: Any
) -> ClientConfig:
    """
    Load ClientConfig from environment.

    Args:
        profile: Profile name (.env.<profile>)
        env_file: Explicit .env path (overrides profile)
        **overrides: Explicit ClientSettings field values

    Returns:
        ClientConfig instance

    Raises:
        ConfigurationError: if settings fail validation

    Example:
        >>> config = load_from_env(profile="staging", timeout=10)
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    try:
        settings = ClientSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid client settings: {e}") from e

    return ClientConfig.create(
        options=settings.to_options(),
        default_timeout=settings.timeout,
        logging=settings.to_logging_config(),
    )
