"""Human and machine renderings of an ErrorClassification."""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .classifier import ErrorCategory, ErrorClassification

USER_MESSAGES = {
    ErrorCategory.NETWORK: "Network error. Please check your connection and try again.",
    ErrorCategory.AUTHENTICATION: "Authentication error. Please sign in again and retry.",
    ErrorCategory.AUTHORIZATION: "You do not have permission to perform this action.",
    ErrorCategory.SYSTEM: "A system error occurred. Please try again later.",
}

# Categories whose own message is more useful to a user than a canned one
FALLBACK_MESSAGES = {
    ErrorCategory.VALIDATION: "Validation error. Please check your input.",
    ErrorCategory.BUSINESS: "A business rule error occurred.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred.",
}


def format_user_message(info: ErrorClassification) -> str:
    """
    Message suitable for showing to an end user.

    Example:
        >>> format_user_message(classify({"status": 503}))
        'A system error occurred. Please try again later.'
    """
    if info.category in USER_MESSAGES:
        return USER_MESSAGES[info.category]
    return info.message or FALLBACK_MESSAGES[info.category]


def format_log_message(
    info: ErrorClassification,
    context: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Single line for logs: ``[CATEGORY] | Service: x | Status: 404 | Message: ...``.

    Args:
        info: Classification to render
        context: Optional ``service``/``operation`` and any extra data
    """
    context = dict(context or {})
    parts = [f"[{info.category.value}]"]

    service = context.pop("service", None)
    if service:
        parts.append(f"Service: {service}")

    operation = context.pop("operation", None)
    if operation:
        parts.append(f"Operation: {operation}")

    if info.status_code is not None:
        parts.append(f"Status: {info.status_code}")

    if info.error_code:
        parts.append(f"Code: {info.error_code}")

    parts.append(f"Message: {info.message}")

    if context:
        data = ", ".join(f"{key}={value}" for key, value in context.items())
        parts.append(f"Data: {data}")

    return " | ".join(parts)


def format_report(
    info: ErrorClassification,
    context: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Plain dict for error reporting sinks (JSON-serialisable)."""
    return {
        "category": info.category.value,
        "message": info.message,
        "status_code": info.status_code,
        "error_code": info.error_code,
        "should_retry": info.should_retry,
        "retry_after": info.retry_after,
        "context": dict(context or {}),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
