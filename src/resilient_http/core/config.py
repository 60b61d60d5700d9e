"""
Система конфигурации resilient-http.

Все конфиги immutable (frozen dataclasses): один экземпляр разделяется
всеми конкурентными вызовами клиента.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Mapping, Optional

from .classifier import ErrorCategory
from .models import merge_headers

if TYPE_CHECKING:
    from .logging import LoggingConfig

DEFAULT_TIMEOUT = 30.0

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RETRY POLICY
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RetryPolicy:
    """
    Политика повторных попыток.

    Args:
        max_attempts: Максимум попыток (включая первую), >= 1
        base_delay: Базовая задержка (сек)
        max_delay: Потолок вычисленной задержки (сек)
        exponential_backoff: True - base_delay * 2^(attempt-1), False - константа
        retryable_categories: Если не пусто, ретраятся только эти категории

    Examples:
        >>> RetryPolicy(max_attempts=3, base_delay=0.1)
        >>> RetryPolicy(max_attempts=5, retryable_categories=[ErrorCategory.NETWORK])
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    exponential_backoff: bool = True
    retryable_categories: FrozenSet[ErrorCategory] = field(default_factory=frozenset)

    def __post_init__(self):
        """Валидация."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.max_delay < 0:
            raise ValueError("max_delay must be non-negative")

        categories = self.retryable_categories
        if isinstance(categories, str):
            # ErrorCategory is a str subclass too
            categories = (categories,)
        if not isinstance(categories, frozenset):
            categories = frozenset(categories or ())
        object.__setattr__(
            self,
            "retryable_categories",
            frozenset(ErrorCategory(c) for c in categories),
        )

    def with_max_attempts(self, max_attempts: int) -> "RetryPolicy":
        """Новая политика с другим лимитом попыток."""
        return RetryPolicy(
            max_attempts=max_attempts,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            exponential_backoff=self.exponential_backoff,
            retryable_categories=self.retryable_categories,
        )


DEFAULT_RETRY_POLICY = RetryPolicy(
    max_attempts=3,
    base_delay=1.0,
    max_delay=10.0,
    exponential_backoff=True,
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CLIENT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class ClientConfig:
    """
    Дефолты клиента, из которых собирается эффективный RequestConfig.

    Args:
        base_url: Базовый URL (опционально)
        headers: Дефолтные заголовки (caller headers мержатся поверх)
        timeout: Таймаут одной попытки (сек)
        retry: Политика retry по умолчанию
        logging: Конфигурация логирования (None = логгер модуля без хендлеров)

    Examples:
        >>> config = ClientConfig(base_url="https://api.example.com")
        >>> config = ClientConfig.create(timeout=60, max_attempts=5)
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: _freeze_dict(DEFAULT_HEADERS))
    timeout: float = DEFAULT_TIMEOUT
    retry: RetryPolicy = DEFAULT_RETRY_POLICY
    logging: Optional["LoggingConfig"] = None

    def __post_init__(self):
        """Normalize base_url, validate timeout and freeze headers."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", _freeze_dict(self.headers))

        if self.timeout is None or self.timeout <= 0:
            raise ValueError("timeout must be positive")

        if self.base_url:
            normalized = self.base_url.rstrip("/")
            if normalized != self.base_url:
                object.__setattr__(self, "base_url", normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: Optional[int] = None,
        base_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        exponential_backoff: Optional[bool] = None,
        retryable_categories: Optional[Iterable[ErrorCategory]] = None,
        headers: Optional[Dict[str, str]] = None,
        logging: Optional["LoggingConfig"] = None,
    ) -> "ClientConfig":
        """
        Удобный конструктор конфигурации.

        Параметры retry, которые не переданы, берутся из DEFAULT_RETRY_POLICY.
        Заголовки мержатся поверх DEFAULT_HEADERS.

        Examples:
            >>> config = ClientConfig.create(timeout=5, max_attempts=3, base_delay=0.1)
        """
        defaults = DEFAULT_RETRY_POLICY
        retry = RetryPolicy(
            max_attempts=defaults.max_attempts if max_attempts is None else max_attempts,
            base_delay=defaults.base_delay if base_delay is None else base_delay,
            max_delay=defaults.max_delay if max_delay is None else max_delay,
            exponential_backoff=(
                defaults.exponential_backoff if exponential_backoff is None else exponential_backoff
            ),
            retryable_categories=(
                defaults.retryable_categories if retryable_categories is None
                else frozenset(retryable_categories)
            ),
        )

        return cls(
            base_url=base_url,
            headers=merge_headers(DEFAULT_HEADERS, headers),
            timeout=timeout,
            retry=retry,
            logging=logging,
        )

    def with_timeout(self, timeout: float) -> "ClientConfig":
        """Новый конфиг с изменённым timeout."""
        return ClientConfig(
            base_url=self.base_url,
            headers=self.headers,
            timeout=timeout,
            retry=self.retry,
            logging=self.logging,
        )

    def with_retry_policy(self, retry: RetryPolicy) -> "ClientConfig":
        """Новый конфиг с другой политикой retry."""
        return ClientConfig(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            retry=retry,
            logging=self.logging,
        )

    def with_headers(self, headers: Dict[str, str]) -> "ClientConfig":
        """
        Новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        return ClientConfig(
            base_url=self.base_url,
            headers=merge_headers(self.headers, headers),
            timeout=self.timeout,
            retry=self.retry,
            logging=self.logging,
        )
