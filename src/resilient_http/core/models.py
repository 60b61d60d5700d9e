"""Request/response value objects passed through the interceptor chain."""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Generic, Mapping, Optional, TypeVar, Union

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .config import RetryPolicy

T = TypeVar("T")


class HttpMethod(str, Enum):
    """Supported HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: Union[str, "HttpMethod"]) -> "HttpMethod":
        """
        Normalise a method name.

        Raises:
            ConfigurationError: If the method is not supported
        """
        if isinstance(value, HttpMethod):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ConfigurationError(f"Unsupported HTTP method: {value!r}")


def merge_headers(
    base: Optional[Mapping[str, str]],
    override: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    """
    Merge two header mappings key by key, ignoring case.

    Values from ``override`` win. The casing of the winning key is kept.

    Example:
        >>> merge_headers({"Accept": "text/plain"}, {"accept": "application/json"})
        {'accept': 'application/json'}
    """
    merged: Dict[str, str] = {}
    index: Dict[str, str] = {}

    for source in (base or {}, override or {}):
        for key, value in source.items():
            lowered = key.lower()
            previous = index.get(lowered)
            if previous is not None:
                del merged[previous]
            merged[key] = value
            index[lowered] = key

    return merged


def _freeze_headers(headers: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if isinstance(headers, MappingProxyType):
        return headers
    return MappingProxyType(dict(headers or {}))


@dataclass(frozen=True)
class RequestConfig:
    """
    Immutable description of one call.

    Attributes:
        url: Absolute URL or path relative to the client's base_url
        method: HTTP method
        headers: Header mapping (frozen)
        body: Opaque body, serialised by the executor unless already text
        timeout: Per-attempt timeout in seconds (None = client default)
        retry_policy: Per-call retry policy override (None = client default)

    Example:
        >>> config = RequestConfig("/users", "post", body={"name": "alice"})
        >>> config.method
        <HttpMethod.POST: 'POST'>
    """
    url: str
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: Any = None
    timeout: Optional[float] = None
    retry_policy: Optional["RetryPolicy"] = None

    def __post_init__(self):
        """Normalise method and freeze headers."""
        if not isinstance(self.url, str) or not self.url:
            raise ConfigurationError(f"Request URL must be a non-empty string, got {self.url!r}")

        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    def replace(self, **changes: Any) -> "RequestConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def with_headers(self, headers: Mapping[str, str]) -> "RequestConfig":
        """Return a copy with ``headers`` merged over the current ones."""
        return replace(self, headers=merge_headers(self.headers, headers))

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default


@dataclass(frozen=True)
class ResponseEnvelope(Generic[T]):
    """
    Result of a successful (2xx) exchange.

    Attributes:
        data: Parsed payload
        status: HTTP status
        status_text: Reason phrase
        headers: Response headers
        config: The RequestConfig that produced this response
    """
    data: T
    status: int
    status_text: str
    headers: Mapping[str, str]
    config: RequestConfig

    def __post_init__(self):
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    def replace(self, **changes: Any) -> "ResponseEnvelope[T]":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
