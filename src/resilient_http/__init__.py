"""resilient-http - async HTTP client with error classification, retries and interceptors."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .async_client import AsyncHTTPClient
from .core.config import RetryPolicy, ClientConfig, DEFAULT_RETRY_POLICY
from .core.models import HttpMethod, RequestConfig, ResponseEnvelope
from .core.exceptions import (
    HTTPClientException,
    NetworkError,
    RequestTimeoutError,
    HTTPStatusError,
    ConfigurationError,
    InterceptorError,
)
from .core.classifier import ErrorCategory, ErrorClassification, ErrorClassifier, classify
from .core.retry_policy import RetryPolicyEvaluator
from .core.interceptors import (
    Interceptor,
    RequestInterceptor,
    ResponseInterceptor,
    HeadersInterceptor,
    InterceptorChain,
)
from .core.logging import ClientLogger, LoggingConfig, create_logger
from .core.settings import ClientSettings, ConfigService, load_client_config

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('resilient_http')
logging.getLogger('resilient_http').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("resilient-http-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    "AsyncHTTPClient",
    # Config
    "RetryPolicy",
    "ClientConfig",
    "DEFAULT_RETRY_POLICY",
    "HttpMethod",
    "RequestConfig",
    "ResponseEnvelope",
    # Exceptions
    "HTTPClientException",
    "NetworkError",
    "RequestTimeoutError",
    "HTTPStatusError",
    "ConfigurationError",
    "InterceptorError",
    # Classification & retry
    "ErrorCategory",
    "ErrorClassification",
    "ErrorClassifier",
    "classify",
    "RetryPolicyEvaluator",
    # Interceptors
    "Interceptor",
    "RequestInterceptor",
    "ResponseInterceptor",
    "HeadersInterceptor",
    "InterceptorChain",
    # Logging & settings
    "ClientLogger",
    "LoggingConfig",
    "create_logger",
    "ClientSettings",
    "ConfigService",
    "load_client_config",
]
