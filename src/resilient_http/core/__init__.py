"""Core modules: classification, retry policy, interceptors, executor."""

from .config import (
    RetryPolicy,
    ClientConfig,
    DEFAULT_RETRY_POLICY,
    DEFAULT_HEADERS,
    DEFAULT_TIMEOUT,
)
from .models import HttpMethod, RequestConfig, ResponseEnvelope, merge_headers
from .exceptions import (
    HTTPClientException,
    NetworkError,
    RequestTimeoutError,
    HTTPStatusError,
    ConfigurationError,
    InterceptorError,
)
from .classifier import ErrorCategory, ErrorClassification, ErrorClassifier, classify
from .error_formatter import format_user_message, format_log_message, format_report
from .retry_policy import RetryPolicyEvaluator
from .interceptors import (
    Interceptor,
    RequestInterceptor,
    ResponseInterceptor,
    HeadersInterceptor,
    InterceptorChain,
    ErrorResolution,
)
from .executor import RequestExecutor

__all__ = [
    # Config
    "RetryPolicy",
    "ClientConfig",
    "DEFAULT_RETRY_POLICY",
    "DEFAULT_HEADERS",
    "DEFAULT_TIMEOUT",
    # Models
    "HttpMethod",
    "RequestConfig",
    "ResponseEnvelope",
    "merge_headers",
    # Exceptions
    "HTTPClientException",
    "NetworkError",
    "RequestTimeoutError",
    "HTTPStatusError",
    "ConfigurationError",
    "InterceptorError",
    # Classification
    "ErrorCategory",
    "ErrorClassification",
    "ErrorClassifier",
    "classify",
    "format_user_message",
    "format_log_message",
    "format_report",
    # Retry
    "RetryPolicyEvaluator",
    # Interceptors
    "Interceptor",
    "RequestInterceptor",
    "ResponseInterceptor",
    "HeadersInterceptor",
    "InterceptorChain",
    "ErrorResolution",
    # Executor
    "RequestExecutor",
]
