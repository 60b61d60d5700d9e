"""
Build ClientConfig from settings sources.

Priority (highest to lowest):
1. **overrides - explicit parameters
2. Source (ConfigService or ClientSettings)
3. Defaults
"""

from typing import Any, Optional, Union

from ..config import ClientConfig, DEFAULT_RETRY_POLICY, RetryPolicy
from ..logging.config import LoggingConfig
from .service import ConfigService, create_default_config_service
from .validator import ClientSettings

ConfigSource = Union[ConfigService, ClientSettings]


def _from_settings(settings: ClientSettings) -> dict:
    return {
        "base_url": settings.base_url or None,
        "timeout": settings.timeout,
        "max_attempts": settings.retry_max_attempts,
        "base_delay": settings.retry_base_delay,
        "max_delay": settings.retry_max_delay,
        "exponential_backoff": settings.retry_exponential_backoff,
        "log_level": settings.log_level if settings.log_enabled else None,
        "log_format": settings.log_format if settings.log_enabled else None,
    }


def _from_service(service: ConfigService) -> dict:
    defaults = DEFAULT_RETRY_POLICY
    return {
        "base_url": service.get_optional("http.base_url"),
        "timeout": service.get("http.default_timeout", 30.0),
        "max_attempts": service.get("http.default_retry_attempts", defaults.max_attempts),
        "base_delay": service.get("http.default_retry_delay", defaults.base_delay),
        "max_delay": service.get("http.max_retry_delay", defaults.max_delay),
        "exponential_backoff": service.get("http.exponential_backoff", defaults.exponential_backoff),
        "log_level": service.get_optional("logging.level"),
        "log_format": service.get_optional("logging.format"),
    }


def load_client_config(source: Optional[ConfigSource] = None, **overrides: Any) -> ClientConfig:
    """
    Load ClientConfig from a ConfigService or ClientSettings.

    Args:
        source: Where to read from (default: environment + DEFAULT_CONFIG)
        **overrides: base_url, timeout, max_attempts, base_delay, max_delay,
            exponential_backoff, log_level, log_format

    Returns:
        ClientConfig instance

    Example:
        >>> config = load_client_config(ClientSettings(), timeout=5)
        >>> config = load_client_config(base_url="https://api.example.com")
    """
    if source is None:
        source = create_default_config_service()

    if isinstance(source, ClientSettings):
        values = _from_settings(source)
    else:
        values = _from_service(source)

    values.update({key: value for key, value in overrides.items() if value is not None})

    logging_config = None
    if values.get("log_level") or values.get("log_format"):
        logging_config = LoggingConfig.create(
            level=values.get("log_level") or "INFO",
            format=values.get("log_format") or "text",
        )

    retry = RetryPolicy(
        max_attempts=int(values["max_attempts"]),
        base_delay=float(values["base_delay"]),
        max_delay=float(values["max_delay"]),
        exponential_backoff=bool(values["exponential_backoff"]),
    )

    return ClientConfig(
        base_url=values.get("base_url"),
        timeout=float(values["timeout"]),
        retry=retry,
        logging=logging_config,
    )
