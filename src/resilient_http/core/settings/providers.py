"""
Configuration providers: read-only key lookup sources for ConfigService.

Keys are dotted paths (``http.default_timeout``).
"""

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

_MISSING = object()


class ConfigProviderError(Exception):
    """A provider could not be built or does not support the operation."""


class ConfigProvider(ABC):
    """Базовый класс источника конфигурации."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Значение по ключу или ``default``."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """Есть ли значение для ключа."""

    def set(self, key: str, value: Any) -> None:
        raise ConfigProviderError(f"{type(self).__name__} is read-only")

    @abstractmethod
    def get_all(self) -> Dict[str, Any]:
        """Все значения (копия)."""

    def clear(self) -> None:
        raise ConfigProviderError(f"{type(self).__name__} is read-only")


def _get_nested(data: Mapping[str, Any], key: str) -> Any:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _set_nested(data: Dict[str, Any], key: str, value: Any) -> None:
    *parents, last = key.split(".")
    target = data
    for part in parents:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]
    target[last] = value


class MemoryConfigProvider(ConfigProvider):
    """
    In-memory provider with nested dotted keys.

    Example:
        >>> provider = MemoryConfigProvider({"http": {"default_timeout": 10}})
        >>> provider.get("http.default_timeout")
        10
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        value = _get_nested(self._values, key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return _get_nested(self._values, key) is not _MISSING

    def set(self, key: str, value: Any) -> None:
        if isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                self.set(f"{key}.{sub_key}", sub_value)
            return
        _set_nested(self._values, key, value)

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def clear(self) -> None:
        self._values = {}


class EnvironmentConfigProvider(ConfigProvider):
    """
    Environment variables: ``http.default_timeout`` -> ``{PREFIX}HTTP_DEFAULT_TIMEOUT``.

    Values are JSON-decoded when possible (``"10"`` -> 10, ``"true"`` -> True).

    Args:
        prefix: Variable name prefix
        environ: Mapping to read instead of ``os.environ``
    """

    def __init__(self, prefix: str = "RESILIENT_HTTP_", environ: Optional[Mapping[str, str]] = None):
        self.prefix = prefix
        self._environ = environ if environ is not None else os.environ

    def _env_key(self, key: str) -> str:
        return f"{self.prefix}{key.upper().replace('.', '_')}"

    @staticmethod
    def _decode(raw: str) -> Any:
        try:
            return json.loads(raw)
        except ValueError:
            return raw

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._environ.get(self._env_key(key))
        if raw is None:
            return default
        return self._decode(raw)

    def has(self, key: str) -> bool:
        return self._env_key(key) in self._environ

    def get_all(self) -> Dict[str, Any]:
        return {
            name[len(self.prefix):].lower().replace("_", "."): self._decode(value)
            for name, value in self._environ.items()
            if name.startswith(self.prefix)
        }


class FileConfigProvider(ConfigProvider):
    """
    YAML or JSON file, format picked by extension.

    Raises:
        FileNotFoundError: Если файл не найден
        ConfigProviderError: Если файл невалидный

    Example:
        >>> provider = FileConfigProvider("config.yaml")
        >>> provider.get("http.default_retry_attempts", 3)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._values = self._load(self.path)

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = path.suffix.lower()
        with open(path, "r", encoding="utf-8") as f:
            try:
                if suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                elif suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigProviderError(
                        f"Unsupported config file format: {suffix}. Use .yaml, .yml or .json"
                    )
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise ConfigProviderError(f"Invalid config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigProviderError(f"Config file {path} must contain a mapping at top level")

        logger.debug(f"Loaded config file {path}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        value = _get_nested(self._values, key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return _get_nested(self._values, key) is not _MISSING

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)
