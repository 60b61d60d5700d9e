"""
Pydantic settings for environment configuration.

Reads RESILIENT_HTTP_* environment variables (and an optional .env file).
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Client defaults from environment variables.

    Reads from:
    1. Environment variables (RESILIENT_HTTP_*)
    2. .env file (when given via ``_env_file``)
    3. Defaults

    Example .env file:
        RESILIENT_HTTP_BASE_URL=https://api.example.com
        RESILIENT_HTTP_TIMEOUT=10
        RESILIENT_HTTP_RETRY_MAX_ATTEMPTS=5
        RESILIENT_HTTP_LOG_ENABLED=true
        RESILIENT_HTTP_LOG_LEVEL=DEBUG

    Usage:
        >>> settings = ClientSettings()
        >>> settings.retry_max_attempts
        3
    """

    model_config = SettingsConfigDict(
        env_prefix='RESILIENT_HTTP_',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Base URL for relative request URLs")
    timeout: float = Field(default=30.0, gt=0, description="Per-attempt timeout in seconds")

    retry_max_attempts: int = Field(default=3, ge=1, le=20)
    retry_base_delay: float = Field(default=1.0, ge=0)
    retry_max_delay: float = Field(default=10.0, ge=0)
    retry_exponential_backoff: bool = Field(default=True)

    log_enabled: bool = Field(default=False, description="Install client log handlers")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v
