"""
Error classification.

Turns an arbitrary failure value (library exception, foreign exception,
error-shaped mapping, bare string) into one ``ErrorClassification``.
Everything downstream (retry decisions, delays, log formatting) works on
the classification instead of probing the raw error again.
"""

import asyncio
import builtins
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

import httpx

from .exceptions import HTTPClientException, HTTPStatusError, NetworkError
from .utils import parse_retry_after

logger = logging.getLogger(__name__)

UNKNOWN_MESSAGE = "An unknown error occurred"

# Baseline delay for transient categories; also the 429 fallback
DEFAULT_RETRY_AFTER = 1.0

NETWORK_MESSAGE_MARKERS = ("network", "fetch", "connection", "timeout")
NETWORK_ERROR_CODES = {"econnrefused", "enetunreach", "etimedout", "timeout"}

_MISSING = object()


class ErrorCategory(str, Enum):
    """Error categories."""
    NETWORK = "NETWORK"
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    VALIDATION = "VALIDATION"
    BUSINESS = "BUSINESS"
    SYSTEM = "SYSTEM"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ErrorClassification:
    """
    Structured verdict for one failure.

    Attributes:
        category: Error category
        message: Human readable message
        status_code: HTTP status, if one could be extracted
        error_code: Machine error code, if one could be extracted
        should_retry: Classifier's own retry recommendation
        retry_after: Explicit wait in seconds (rate limiting); authoritative
        backoff_hint: Baseline wait signalled for transient categories;
            informational, the retry policy's backoff formula wins
        fatal: Programmer error (bad config, broken interceptor); never retried
        original_error: The raw failure value
    """
    category: ErrorCategory
    message: str
    status_code: Optional[int] = None
    error_code: Optional[str] = None
    should_retry: bool = False
    retry_after: Optional[float] = None
    backoff_hint: Optional[float] = None
    fatal: bool = False
    original_error: Any = field(default=None, compare=False, repr=False)

    @property
    def is_transient(self) -> bool:
        return self.category in (ErrorCategory.NETWORK, ErrorCategory.SYSTEM)


def _lookup(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if obj is None:
        return _MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    if isinstance(obj, (str, bytes, int, float, bool)):
        return _MISSING
    try:
        return getattr(obj, name, _MISSING)
    except Exception:
        # Lazy properties on foreign objects (e.g. httpx.Response.json) may raise
        return _MISSING


def _dig(obj: Any, *path: str) -> Any:
    """Follow ``path`` through nested mappings/attributes; None if any hop is missing."""
    current = obj
    for name in path:
        current = _lookup(current, name)
        if current is _MISSING or current is None:
            return None
    return current


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class ErrorClassifier:
    """
    Classifies failures into ``ErrorClassification`` values.

    Stateless; one instance may be shared by any number of concurrent calls.

    Example:
        >>> classifier = ErrorClassifier()
        >>> info = classifier.classify({"status": 503})
        >>> info.category, info.should_retry
        (<ErrorCategory.SYSTEM: 'SYSTEM'>, True)
    """

    def classify(self, error: Any) -> ErrorClassification:
        """
        Classify ``error``. Never raises.

        A failure inside classification itself yields an UNKNOWN verdict.
        """
        if isinstance(error, ErrorClassification):
            return error

        try:
            return self._classify(error)
        except Exception as exc:
            logger.debug(f"Error classification failed: {exc!r}")
            return ErrorClassification(
                category=ErrorCategory.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                original_error=error,
            )

    def _classify(self, error: Any) -> ErrorClassification:
        if isinstance(error, HTTPClientException) and error.fatal:
            return ErrorClassification(
                category=ErrorCategory.UNKNOWN,
                message=self.extract_message(error),
                error_code=self.extract_error_code(error),
                fatal=True,
                original_error=error,
            )

        status = self.extract_status_code(error)
        category = self.categorize(error, status)

        should_retry = (
            category in (ErrorCategory.NETWORK, ErrorCategory.SYSTEM)
            or status == 429
        )

        retry_after: Optional[float] = None
        backoff_hint: Optional[float] = None
        if status == 429:
            retry_after = self._header_retry_after(error)
            if retry_after is None:
                retry_after = DEFAULT_RETRY_AFTER
        elif category in (ErrorCategory.NETWORK, ErrorCategory.SYSTEM):
            backoff_hint = DEFAULT_RETRY_AFTER

        return ErrorClassification(
            category=category,
            message=self.extract_message(error),
            status_code=status,
            error_code=self.extract_error_code(error),
            should_retry=should_retry,
            retry_after=retry_after,
            backoff_hint=backoff_hint,
            original_error=error,
        )

    # ==================== Category ====================

    def categorize(self, error: Any, status: Optional[int] = None) -> ErrorCategory:
        """Pick the category; the checks run in a fixed order, first match wins."""
        if error is None:
            return ErrorCategory.UNKNOWN
        if status is None:
            status = self.extract_status_code(error)

        if self._is_network_error(error):
            return ErrorCategory.NETWORK
        if self._is_authentication_error(error, status):
            return ErrorCategory.AUTHENTICATION
        if self._is_authorization_error(error, status):
            return ErrorCategory.AUTHORIZATION
        if self._is_validation_error(error, status):
            return ErrorCategory.VALIDATION
        if status is not None and 400 <= status < 500:
            return ErrorCategory.BUSINESS
        if status is not None and 500 <= status < 600:
            return ErrorCategory.SYSTEM
        return ErrorCategory.UNKNOWN

    def _is_network_error(self, error: Any) -> bool:
        if isinstance(error, (
            NetworkError,
            httpx.TransportError,
            builtins.ConnectionError,
            builtins.TimeoutError,
            asyncio.TimeoutError,
        )):
            return True

        # A completed exchange is never a transport failure, whatever its reason phrase says
        if isinstance(error, HTTPStatusError):
            return False

        message = (self._raw_message(error) or "").lower()
        if any(marker in message for marker in NETWORK_MESSAGE_MARKERS):
            return True

        code = _dig(error, "code")
        if isinstance(code, str) and code.lower() in NETWORK_ERROR_CODES:
            return True

        return self._error_name(error) == "NetworkError"

    def _is_authentication_error(self, error: Any, status: Optional[int]) -> bool:
        return (
            status == 401
            or _dig(error, "code") == "UNAUTHORIZED"
            or self._error_name(error) == "UnauthorizedError"
        )

    def _is_authorization_error(self, error: Any, status: Optional[int]) -> bool:
        return (
            status == 403
            or _dig(error, "code") == "FORBIDDEN"
            or self._error_name(error) == "ForbiddenError"
        )

    def _is_validation_error(self, error: Any, status: Optional[int]) -> bool:
        nested_code = _dig(error, "error", "code")
        return (
            status == 400
            or _dig(error, "code") == "VALIDATION_ERROR"
            or self._error_name(error) == "ValidationError"
            or (isinstance(nested_code, str) and "Validation" in nested_code)
        )

    # ==================== Extraction ====================

    def extract_status_code(self, error: Any) -> Optional[int]:
        """status, status_code, response.status, response.status_code."""
        for path in (
            ("status",),
            ("status_code",),
            ("response", "status"),
            ("response", "status_code"),
        ):
            status = _as_status(_dig(error, *path))
            if status is not None:
                return status
        return None

    def extract_error_code(self, error: Any) -> Optional[str]:
        """code, error.code, response.data.error.code."""
        for path in (
            ("code",),
            ("error", "code"),
            ("response", "data", "error", "code"),
            ("response", "error", "code"),
        ):
            code = _dig(error, *path)
            if code is not None and not isinstance(code, (Mapping, list)):
                return str(code)
        return None

    def extract_message(self, error: Any) -> str:
        message = self._raw_message(error)
        if message:
            return message

        if isinstance(error, Mapping):
            try:
                return json.dumps(error, default=str)
            except (TypeError, ValueError):
                return UNKNOWN_MESSAGE

        return UNKNOWN_MESSAGE

    def _raw_message(self, error: Any) -> Optional[str]:
        if error is None:
            return None

        nested = _dig(error, "error", "message")
        if isinstance(nested, str) and nested:
            return nested

        message = _dig(error, "message")
        if isinstance(message, str) and message:
            return message

        if isinstance(error, str):
            return error

        if isinstance(error, BaseException):
            return str(error) or type(error).__name__

        return None

    def _error_name(self, error: Any) -> Optional[str]:
        name = _dig(error, "name")
        if isinstance(name, str):
            return name
        if isinstance(error, BaseException):
            return type(error).__name__
        return None

    def _header_retry_after(self, error: Any) -> Optional[float]:
        for path in (("response", "headers"), ("headers",)):
            headers = _dig(error, *path)
            if headers is None or not hasattr(headers, "items"):
                continue
            for key, value in headers.items():
                if str(key).lower() == "retry-after":
                    return parse_retry_after(value)
        return None


default_classifier = ErrorClassifier()


def classify(error: Any) -> ErrorClassification:
    """Classify with the shared stateless classifier."""
    return default_classifier.classify(error)
