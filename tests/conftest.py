"""
Pytest configuration and fixtures for resilient-http tests.
"""

import pytest

from src.resilient_http.async_client import AsyncHTTPClient
from src.resilient_http.core.config import RetryPolicy
from src.resilient_http.core.logging.filters import clear_correlation_id
from src.resilient_http.core.retry_policy import RetryPolicyEvaluator


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def fast_policy():
    """Retry policy with delays small enough for real sleeps."""
    return RetryPolicy(max_attempts=3, base_delay=0.01, max_delay=0.05)


@pytest.fixture
def recorded_waits(monkeypatch):
    """
    Replace the inter-attempt wait with a recorder.

    Returns the list of requested delays (seconds), in order.
    """
    waits = []

    async def fake_wait(self, seconds):
        waits.append(seconds)

    monkeypatch.setattr(RetryPolicyEvaluator, "async_wait", fake_wait)
    return waits


@pytest.fixture
def client(base_url):
    """AsyncHTTPClient instance for testing (closed by the test via async with)."""
    return AsyncHTTPClient(base_url=base_url, timeout=5)


@pytest.fixture(autouse=True)
def reset_correlation_id():
    """Clear correlation ID before and after each test."""
    clear_correlation_id()
    yield
    clear_correlation_id()
