"""
Иерархия исключений resilient-http.

Классификация:
- retryable=True - сетевые сбои, таймауты, 5xx и 429
- fatal=True - ошибки конфигурации, НЕ ретраить никогда

Решение о повторе принимает RetryPolicyEvaluator по ErrorClassification,
fatal классификатор читает сам (такие ошибки не ретраятся ни при каком
белом списке), retryable - лишь подсказка для пользовательского кода.
"""

from typing import Any, Mapping, Optional

from .utils import sanitize_url

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение resilient-http."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# СЕТЕВЫЕ ОШИБКИ (retryable=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class NetworkError(HTTPClientException):
    """
    Ошибка транспорта: отказ соединения, DNS, обрыв.

    Args:
        message: Сообщение об ошибке
        url: URL запроса (в сообщении секретные query-параметры замаскированы)
        code: Машинный код (например имя класса ошибки транспорта)
    """
    retryable = True

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        code: Optional[str] = None
    ):
        self.url = url
        self.code = code

        full_message = message
        if url:
            full_message += f" (url: {sanitize_url(url)})"
        super().__init__(full_message)


class RequestTimeoutError(NetworkError):
    """
    Попытка не уложилась в таймаут.

    Несёт синтетический код "TIMEOUT" и статус 408, поэтому классифицируется
    как NETWORK и ретраится как любой другой временный сбой сети.

    Args:
        url: URL запроса
        timeout: Значение таймаута (сек)
    """

    status = 408

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = timeout

        msg = "Request timeout"
        if timeout is not None:
            msg += f" ({timeout}s)"

        super().__init__(msg, url, code="TIMEOUT")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStatusError(HTTPClientException):
    """
    Сервер ответил статусом вне 2xx.

    Args:
        status: HTTP статус
        status_text: Reason phrase
        response: Распарсенное тело ответа (dict, list или str)
        headers: Заголовки ответа
        url: URL
    """

    def __init__(
        self,
        status: int,
        status_text: str = "",
        response: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        url: Optional[str] = None,
    ):
        self.status = status
        self.status_text = status_text
        self.response = response
        self.headers = dict(headers or {})
        self.url = url

        msg = f"HTTP {status}"
        if status_text:
            msg += f" {status_text}"

        super().__init__(msg)

    @property
    def status_code(self) -> int:
        """Alias для совместимости с httpx/requests."""
        return self.status

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status == 429 or 500 <= self.status < 600

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ПРОГРАММИСТА (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(HTTPClientException):
    """Невалидный RequestConfig (например неподдерживаемый метод)."""
    fatal = True


class InterceptorError(HTTPClientException):
    """
    Интерсептор вернул значение неверного типа.

    Args:
        interceptor: Имя интерсептора
        hook: Имя хука (on_request, on_response)
        returned: Что вернул хук
    """

    fatal = True

    def __init__(self, interceptor: str, hook: str, returned: Any):
        self.interceptor = interceptor
        self.hook = hook

        msg = (
            f"Interceptor {interceptor}.{hook} returned "
            f"{type(returned).__name__}"
        )
        super().__init__(msg)
