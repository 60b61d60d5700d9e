"""
ConfigService: ordered chain of configuration providers.

The first provider that defines a key wins. ``set`` writes to the first
provider, so put a writable (memory) provider at the front.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import ConfigurationError
from .providers import ConfigProvider, EnvironmentConfigProvider, MemoryConfigProvider

logger = logging.getLogger(__name__)

_MISSING = object()

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}

DEFAULT_CONFIG: Dict[str, Any] = {
    "http": {
        "default_timeout": 30.0,
        "default_retry_attempts": 3,
        "default_retry_delay": 1.0,
    },
    "logging": {
        "default_level": "INFO",
        "enable_console": True,
    },
}


def _coerce(value: Any, like: Any) -> Any:
    """Coerce ``value`` towards the type of ``like`` (bool, int, float)."""
    if like is None or like is _MISSING or value is None:
        return value

    if isinstance(like, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        if isinstance(value, (int, float)):
            return bool(value)
        raise ConfigurationError(f"Cannot interpret {value!r} as bool")

    if isinstance(like, (int, float)) and not isinstance(value, bool):
        try:
            return type(like)(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Cannot interpret {value!r} as {type(like).__name__}")

    if isinstance(like, str) and not isinstance(value, str):
        return str(value)

    return value


class ConfigService:
    """
    Configuration lookup over several providers.

    Args:
        providers: Providers in priority order. By default a memory provider
            followed by the environment provider.

    Example:
        >>> service = ConfigService([MemoryConfigProvider(DEFAULT_CONFIG)])
        >>> service.get("http.default_retry_attempts", 5)
        3
    """

    def __init__(self, providers: Optional[Iterable[ConfigProvider]] = None):
        if providers is None:
            providers = [MemoryConfigProvider(), EnvironmentConfigProvider()]
        self._providers: List[ConfigProvider] = list(providers)

    @property
    def providers(self) -> List[ConfigProvider]:
        return list(self._providers)

    def add_provider(self, provider: ConfigProvider, priority: int = 0) -> None:
        """Insert ``provider`` at position ``priority`` (0 = consulted first)."""
        self._providers.insert(priority, provider)

    def remove_provider(self, provider: ConfigProvider) -> None:
        if provider in self._providers:
            self._providers.remove(provider)

    def get(self, key: str, default: Any = _MISSING) -> Any:
        """
        Значение первого провайдера, где ключ определён.

        Если передан ``default``, значение приводится к его типу
        (например строка ``"5"`` из окружения к int).

        Raises:
            ConfigurationError: Ключ не найден и default не передан,
                или значение нельзя привести к типу default
        """
        for provider in self._providers:
            if provider.has(key):
                value = provider.get(key)
                if value is not None:
                    return _coerce(value, default)

        if default is _MISSING:
            logger.warning(f"Configuration key '{key}' not found and no default provided")
            raise ConfigurationError(f"Configuration key '{key}' not found")

        return default

    def get_optional(self, key: str, default: Any = None) -> Any:
        """Like ``get`` but never raises for a missing key."""
        return self.get(key, default)

    def has(self, key: str) -> bool:
        return any(provider.has(key) for provider in self._providers)

    def set(self, key: str, value: Any) -> None:
        """Write to the first provider."""
        if not self._providers:
            raise ConfigurationError("ConfigService has no providers")
        self._providers[0].set(key, value)

    def load(self, values: Dict[str, Any]) -> None:
        """Set every top-level entry of ``values``."""
        for key, value in values.items():
            self.set(key, value)
        logger.debug(f"Configuration loaded: {sorted(values)}")

    def get_all(self) -> Dict[str, Any]:
        """Merged snapshot; earlier providers override later ones."""
        merged: Dict[str, Any] = {}
        for provider in reversed(self._providers):
            merged.update(provider.get_all())
        return merged

    def validate(self, required_keys: Iterable[str]) -> List[str]:
        """
        Check that every key is defined.

        Returns:
            Missing keys (empty list when valid)
        """
        missing = [key for key in required_keys if not self.has(key)]
        if missing:
            logger.error(f"Configuration validation failed, missing: {missing}")
        return missing

    def clear(self) -> None:
        """Clear every writable provider."""
        for provider in self._providers:
            if isinstance(provider, MemoryConfigProvider):
                provider.clear()


def create_default_config_service(*extra: ConfigProvider) -> ConfigService:
    """
    Service with ``extra`` providers first, then environment, then DEFAULT_CONFIG.

    Example:
        >>> service = create_default_config_service(FileConfigProvider("config.yaml"))
        >>> service.get("http.default_timeout", 30.0)
    """
    return ConfigService([
        MemoryConfigProvider(),
        *extra,
        EnvironmentConfigProvider(),
        MemoryConfigProvider(DEFAULT_CONFIG),
    ])
