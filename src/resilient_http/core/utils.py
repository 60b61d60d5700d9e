"""
Utility functions for the HTTP client.

Includes:
- URL resolution against a base URL
- URL sanitization for safe logging
- Retry-After header parsing
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Set
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

logger = logging.getLogger(__name__)

# Default sensitive parameter names that should be masked in logs
DEFAULT_SENSITIVE_PARAMS = {
    'api_key',
    'apikey',
    'api-key',
    'token',
    'access_token',
    'accesstoken',
    'refresh_token',
    'key',
    'secret',
    'password',
    'passwd',
    'pwd',
    'auth',
    'authorization',
    'credentials',
    'client_secret',
    'private_key',
    'session',
    'session_id',
    'sessionid',
}

# Normal values are "120" or "Wed, 21 Oct 2015 07:28:00 GMT"
MAX_RETRY_AFTER_LENGTH = 100
MAX_RETRY_AFTER_SECONDS = 86400 * 365


def is_absolute_url(url: str) -> bool:
    """True when ``url`` carries its own scheme and host."""
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def resolve_url(url: str, base_url: Optional[str]) -> str:
    """
    Resolve ``url`` against ``base_url`` unless it is already absolute.

    Examples:
        >>> resolve_url("/data", "https://api.example.com")
        'https://api.example.com/data'
        >>> resolve_url("data", "https://api.example.com/v1/")
        'https://api.example.com/v1/data'
        >>> resolve_url("https://other.example.com/x", "https://api.example.com")
        'https://other.example.com/x'
    """
    if is_absolute_url(url) or not base_url:
        return url

    return base_url.rstrip('/') + '/' + url.lstrip('/')


def sanitize_url(
    url: str,
    extra_params: Optional[Set[str]] = None,
    mask: str = 'REDACTED'
) -> str:
    """
    Mask sensitive query parameters in URL for safe logging.

    Args:
        url: The URL to sanitize
        extra_params: Additional parameter names to mask (case-insensitive)
        mask: The string to use for masking (default: 'REDACTED')

    Returns:
        Sanitized URL with sensitive parameters masked

    Examples:
        >>> sanitize_url('https://api.example.com/data?api_key=secret123')
        'https://api.example.com/data?api_key=REDACTED'
    """
    if not url:
        return url

    try:
        sensitive_params = DEFAULT_SENSITIVE_PARAMS | (
            {p.lower() for p in extra_params} if extra_params else set()
        )

        parsed = urlparse(url)

        if not parsed.query:
            return url

        params = parse_qs(parsed.query, keep_blank_values=True)

        sanitized_params = {}
        for param_name, param_values in params.items():
            if param_name.lower() in sensitive_params:
                sanitized_params[param_name] = [mask] * len(param_values)
            else:
                sanitized_params[param_name] = param_values

        new_query = urlencode(sanitized_params, doseq=True)
        return urlunparse(parsed._replace(query=new_query))

    except ValueError:
        # Don't risk exposing the original URL
        return '<URL sanitization failed>'


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Parse a Retry-After header value into seconds.

    Accepts delta-seconds ("120") or an HTTP-date. Dates in the past
    yield 0.

    Returns:
        Seconds to wait, or None when the value is absent or unusable

    Security:
        - Oversized values are ignored
        - Negative or absurdly large values are ignored
    """
    if value is None:
        return None

    value = str(value).strip()
    if not value:
        return None

    if len(value) > MAX_RETRY_AFTER_LENGTH:
        logger.warning(
            f"Retry-After header too long ({len(value)} chars), ignoring. "
            f"Value: {value[:50]}..."
        )
        return None

    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        if seconds < 0 or seconds > MAX_RETRY_AFTER_SECONDS:
            logger.warning(f"Retry-After seconds value out of reasonable range: {seconds}")
            return None
        return seconds

    try:
        retry_date = parsedate_to_datetime(value)
    except (ValueError, TypeError, OverflowError, IndexError) as e:
        logger.debug(f"Failed to parse Retry-After header '{value}': {e}")
        return None

    if retry_date is None:
        return None
    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=timezone.utc)

    delta = (retry_date - datetime.now(timezone.utc)).total_seconds()
    return max(0.0, delta)
