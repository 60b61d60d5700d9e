"""
Retry policy evaluator.

Решает, нужен ли повтор, и сколько ждать перед ним:
- Лимит попыток (attempt >= max_attempts -> стоп)
- Белый список категорий политики сужает рекомендацию классификатора
- Явный retry_after (429 / Retry-After) побеждает формулу backoff
- Exponential backoff с потолком max_delay
"""

import asyncio
import logging
from typing import Any, Optional

from .classifier import ErrorClassification, ErrorClassifier, default_classifier
from .config import RetryPolicy

logger = logging.getLogger(__name__)


class RetryPolicyEvaluator:
    """
    Механизм retry без собственного состояния.

    Номер попытки передаётся явно, поэтому один экземпляр безопасно
    разделяется между конкурентными запросами.

    Examples:
        >>> evaluator = RetryPolicyEvaluator()
        >>> policy = RetryPolicy(max_attempts=3, base_delay=0.1)
        >>> if evaluator.should_retry(error, attempt, policy):
        >>>     await evaluator.async_wait(evaluator.get_delay(error, attempt, policy))
    """

    def __init__(self, classifier: Optional[ErrorClassifier] = None):
        """
        Args:
            classifier: Классификатор ошибок (по умолчанию общий stateless)
        """
        self.classifier = classifier or default_classifier

    def classify(self, error: Any) -> ErrorClassification:
        """Классифицировать (уже готовая классификация возвращается как есть)."""
        return self.classifier.classify(error)

    def should_retry(self, error: Any, attempt: int, policy: RetryPolicy) -> bool:
        """
        Решить нужен ли retry после неудачной попытки ``attempt``.

        Args:
            error: Исключение, произвольное значение ошибки или ErrorClassification
            attempt: Номер неудавшейся попытки (с 1)
            policy: Политика

        Returns:
            True если нужен retry
        """
        _check_attempt(attempt)

        if attempt >= policy.max_attempts:
            return False

        info = self.classify(error)

        if info.fatal:
            return False

        # Белый список только сужает рекомендацию классификатора
        if policy.retryable_categories:
            return info.category in policy.retryable_categories

        return info.should_retry

    def get_delay(self, error: Any, attempt: int, policy: RetryPolicy) -> float:
        """
        Вычислить паузу (сек) перед попыткой ``attempt + 1``.

        Приоритет 1: retry_after из классификации, без потолка max_delay.
        Приоритет 2: backoff по формуле политики.
        """
        _check_attempt(attempt)

        info = self.classify(error)
        if info.retry_after is not None:
            return info.retry_after

        return self.calculate_delay(attempt, policy)

    @staticmethod
    def calculate_delay(attempt: int, policy: RetryPolicy) -> float:
        """
        Backoff по формуле политики.

        Examples:
            >>> policy = RetryPolicy(base_delay=1.0, max_delay=10.0)
            >>> [RetryPolicyEvaluator.calculate_delay(a, policy) for a in (1, 2, 3, 4, 5)]
            [1.0, 2.0, 4.0, 8.0, 10.0]
        """
        _check_attempt(attempt)

        if not policy.exponential_backoff:
            wait = policy.base_delay
        else:
            wait = policy.base_delay * (2 ** (attempt - 1))

        return min(wait, policy.max_delay)

    async def async_wait(self, seconds: float) -> None:
        """
        Асинхронное ожидание перед retry.

        Examples:
            >>> await evaluator.async_wait(0.5)
        """
        if seconds > 0:
            await asyncio.sleep(seconds)


def _check_attempt(attempt: int) -> None:
    if attempt < 1:
        raise ValueError(f"attempt is 1-indexed, got {attempt}")
