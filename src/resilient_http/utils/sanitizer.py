"""
Masking of sensitive values before they reach log records.

Protects passwords, tokens, API keys and the like passed as structured
log fields (headers, bodies, URLs).
"""

import re
from typing import Any, Dict

DEFAULT_MASK = "***REDACTED***"

# Case-insensitive; a key containing any of these is masked
SENSITIVE_KEYS = {
    # Passwords
    'password', 'passwd', 'pwd',
    # Tokens
    'token', 'access_token', 'refresh_token', 'api_token', 'jwt', 'id_token',
    # Secrets
    'secret', 'client_secret', 'secret_key',
    # API keys
    'api_key', 'apikey', 'api-key', 'private_key',
    # Authentication
    'authorization', 'authentication', 'credentials',
    # Sessions and cookies
    'cookie', 'session', 'csrf', 'xsrf',
    # Payments
    'credit_card', 'card_number', 'cvv', 'cvc', 'ssn',
    # One-time codes
    'otp', 'mfa_code', 'pin_code',
}

SENSITIVE_PATTERNS = [
    # Bearer / Basic credentials inside header values
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    # key=value pairs in query strings and free text
    (re.compile(r'(api[_-]?key[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(token[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
    (re.compile(r'(password[\s:=]+)([^\s&,;]+)', re.IGNORECASE), r'\1' + DEFAULT_MASK),
]


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Recursively mask sensitive values in mappings, sequences and strings.

    Returns a copy; the input is never modified.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "application/json"})
        {'Authorization': '***REDACTED***', 'Accept': 'application/json'}

        >>> mask_sensitive_data("https://api.example.com?api_key=secret123&page=1")
        'https://api.example.com?api_key=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _mask_string(data, mask)

    if hasattr(data, "items"):
        return _mask_mapping(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    # Other objects are left alone rather than serialised
    return data


def is_sensitive_key(key: Any) -> bool:
    """True if ``key`` names or contains a sensitive field."""
    lowered = str(key).lower()
    return any(sensitive in lowered for sensitive in SENSITIVE_KEYS)


def _mask_mapping(data: Any, mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(key):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str, mask: str) -> str:
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        if mask != DEFAULT_MASK:
            replacement = replacement.replace(DEFAULT_MASK, mask)
        result = pattern.sub(replacement, result)
    return result
