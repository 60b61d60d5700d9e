"""Тесты RetryPolicyEvaluator."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from src.resilient_http.core.classifier import ErrorCategory, ErrorClassification
from src.resilient_http.core.config import RetryPolicy
from src.resilient_http.core.exceptions import (
    ConfigurationError,
    HTTPStatusError,
    InterceptorError,
    NetworkError,
)
from src.resilient_http.core.retry_policy import RetryPolicyEvaluator


@pytest.fixture
def evaluator():
    return RetryPolicyEvaluator()


def test_exponential_delays_capped():
    """1, 2, 4, 8, затем потолок 10."""
    policy = RetryPolicy(max_attempts=10, base_delay=1.0, max_delay=10.0)

    delays = [RetryPolicyEvaluator.calculate_delay(a, policy) for a in (1, 2, 3, 4, 5)]

    assert delays == [1.0, 2.0, 4.0, 8.0, 10.0]


def test_constant_delay():
    policy = RetryPolicy(base_delay=0.5, max_delay=10.0, exponential_backoff=False)

    assert RetryPolicyEvaluator.calculate_delay(1, policy) == 0.5
    assert RetryPolicyEvaluator.calculate_delay(4, policy) == 0.5


def test_constant_delay_capped_by_max_delay():
    policy = RetryPolicy(base_delay=5.0, max_delay=2.0, exponential_backoff=False)
    assert RetryPolicyEvaluator.calculate_delay(1, policy) == 2.0


def test_retry_after_header_wins(evaluator):
    """Retry-After: 2 даёт ровно 2 секунды независимо от base_delay."""
    policy = RetryPolicy(base_delay=0.1, max_delay=1.0)
    error = HTTPStatusError(429, "Too Many Requests", headers={"Retry-After": "2"})

    assert evaluator.get_delay(error, 1, policy) == 2.0
    assert evaluator.get_delay(error, 2, policy) == 2.0


def test_network_error_uses_policy_backoff(evaluator):
    policy = RetryPolicy(base_delay=0.1, max_delay=10.0)
    error = NetworkError("Connection refused")

    assert evaluator.get_delay(error, 1, policy) == pytest.approx(0.1)
    assert evaluator.get_delay(error, 2, policy) == pytest.approx(0.2)


def test_get_delay_accepts_classification(evaluator):
    info = ErrorClassification(category=ErrorCategory.BUSINESS, message="slow down", retry_after=3.0)
    assert evaluator.get_delay(info, 1, RetryPolicy()) == 3.0


class TestShouldRetry:

    def test_transient_error_retried(self, evaluator):
        policy = RetryPolicy(max_attempts=3)
        assert evaluator.should_retry(NetworkError("down"), 1, policy) is True
        assert evaluator.should_retry(HTTPStatusError(503), 2, policy) is True

    @pytest.mark.parametrize("error", [
        NetworkError("down"),
        HTTPStatusError(503),
        HTTPStatusError(429),
        HTTPStatusError(404),
    ])
    def test_attempt_limit_independent_of_category(self, evaluator, error):
        policy = RetryPolicy(max_attempts=3)

        assert evaluator.should_retry(error, 3, policy) is False
        assert evaluator.should_retry(error, 4, policy) is False

    def test_single_attempt_policy_never_retries(self, evaluator):
        assert evaluator.should_retry(NetworkError("down"), 1, RetryPolicy(max_attempts=1)) is False

    def test_business_error_not_retried(self, evaluator):
        assert evaluator.should_retry(HTTPStatusError(404), 1, RetryPolicy()) is False

    def test_rate_limit_retried_by_default(self, evaluator):
        assert evaluator.should_retry(HTTPStatusError(429), 1, RetryPolicy()) is True

    def test_whitelist_narrows(self, evaluator):
        policy = RetryPolicy(max_attempts=5, retryable_categories=[ErrorCategory.NETWORK])

        assert evaluator.should_retry(NetworkError("down"), 1, policy) is True
        assert evaluator.should_retry(HTTPStatusError(404), 1, policy) is False
        assert evaluator.should_retry(HTTPStatusError(429), 1, policy) is False
        assert evaluator.should_retry(HTTPStatusError(503), 1, policy) is False

    def test_whitelist_accepts_category_values(self, evaluator):
        policy = RetryPolicy(retryable_categories=["SYSTEM"])

        assert ErrorCategory.SYSTEM in policy.retryable_categories
        assert evaluator.should_retry(HTTPStatusError(500), 1, policy) is True

    def test_whitelist_accepts_single_category(self, evaluator):
        assert RetryPolicy(retryable_categories="NETWORK").retryable_categories == {ErrorCategory.NETWORK}
        assert RetryPolicy(retryable_categories=ErrorCategory.SYSTEM).retryable_categories == {
            ErrorCategory.SYSTEM
        }

    @pytest.mark.parametrize("error", [
        ConfigurationError("timeout must be positive"),
        InterceptorError("FetchInterceptor", "on_response", None),
    ])
    def test_fatal_error_never_retried(self, evaluator, error):
        assert evaluator.should_retry(error, 1, RetryPolicy()) is False
        # not even when UNKNOWN is whitelisted
        policy = RetryPolicy(retryable_categories=[ErrorCategory.UNKNOWN, ErrorCategory.NETWORK])
        assert evaluator.should_retry(error, 1, policy) is False

    @pytest.mark.parametrize("attempt", [0, -1])
    def test_attempt_is_one_indexed(self, evaluator, attempt):
        with pytest.raises(ValueError):
            evaluator.should_retry(NetworkError("down"), attempt, RetryPolicy())
        with pytest.raises(ValueError):
            RetryPolicyEvaluator.calculate_delay(attempt, RetryPolicy())


@pytest.mark.asyncio
async def test_async_wait_sleeps():
    evaluator = RetryPolicyEvaluator()

    with patch("src.resilient_http.core.retry_policy.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await evaluator.async_wait(0.25)

    sleep.assert_awaited_once_with(0.25)


@pytest.mark.asyncio
async def test_async_wait_zero_does_not_sleep():
    evaluator = RetryPolicyEvaluator()

    with patch("src.resilient_http.core.retry_policy.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await evaluator.async_wait(0)

    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_evaluator_shared_between_tasks():
    """Нет состояния между вызовами: одинаковые ответы из конкурентных задач."""
    evaluator = RetryPolicyEvaluator()
    policy = RetryPolicy(max_attempts=3, base_delay=0.1)

    async def decide(attempt):
        await asyncio.sleep(0)
        return evaluator.should_retry(NetworkError("down"), attempt, policy)

    results = await asyncio.gather(*(decide(a) for a in (1, 2, 3, 1, 2, 3)))

    assert results == [True, True, False, True, True, False]
