"""
Configuration sources for resilient-http.

- ClientSettings: RESILIENT_HTTP_* environment variables (pydantic-settings)
- ConfigService: ordered provider chain (memory, environment, YAML/JSON file)
- load_client_config: turn either source into a ClientConfig
"""

from .validator import ClientSettings
from .providers import (
    ConfigProvider,
    ConfigProviderError,
    MemoryConfigProvider,
    EnvironmentConfigProvider,
    FileConfigProvider,
)
from .service import ConfigService, DEFAULT_CONFIG, create_default_config_service
from .loader import load_client_config

__all__ = [
    "ClientSettings",
    "ConfigProvider",
    "ConfigProviderError",
    "MemoryConfigProvider",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "ConfigService",
    "DEFAULT_CONFIG",
    "create_default_config_service",
    "load_client_config",
]
