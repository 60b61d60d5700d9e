"""Tests for sensitive data masking."""

import pytest

from src.resilient_http.utils.sanitizer import DEFAULT_MASK, is_sensitive_key, mask_sensitive_data


@pytest.mark.parametrize("key", ["password", "Authorization", "X-API-Key", "refresh_token", "session_id", "Cookie"])
def test_sensitive_keys(key):
    assert is_sensitive_key(key) is True


@pytest.mark.parametrize("key", ["attempt", "delay", "category", "url", "status_code", "max_attempts"])
def test_regular_keys(key):
    assert is_sensitive_key(key) is False


def test_nested_structures():
    data = {
        "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
        "items": [{"password": "x"}, {"name": "y"}],
        "attempt": 1,
    }

    masked = mask_sensitive_data(data)

    assert masked == {
        "headers": {"Authorization": DEFAULT_MASK, "Accept": "application/json"},
        "items": [{"password": DEFAULT_MASK}, {"name": "y"}],
        "attempt": 1,
    }
    assert data["headers"]["Authorization"] == "Bearer abc"


def test_strings():
    assert mask_sensitive_data("Bearer abc.def") == f"Bearer {DEFAULT_MASK}"
    assert mask_sensitive_data("https://x.example.com/?api_key=s3cr3t&page=2") == (
        f"https://x.example.com/?api_key={DEFAULT_MASK}&page=2"
    )


def test_custom_mask():
    assert mask_sensitive_data({"token": "abc"}, mask="***") == {"token": "***"}
    assert mask_sensitive_data("password=hunter2", mask="***") == "password=***"


def test_tuple_type_preserved_and_scalars_untouched():
    assert mask_sensitive_data(("token=abc", 1)) == (f"token={DEFAULT_MASK}", 1)
    assert mask_sensitive_data(None) is None
    assert mask_sensitive_data(3.5) == 3.5
