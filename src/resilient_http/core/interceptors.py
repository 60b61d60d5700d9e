"""
Interceptors: request/response/error hooks wrapped around every attempt.

Хуки могут быть как обычными функциями, так и корутинами. Отсутствующий
хук - это pass-through. Порядок выполнения = порядок регистрации.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, List, Mapping, Optional, Union

from .exceptions import InterceptorError
from .models import RequestConfig, ResponseEnvelope

logger = logging.getLogger(__name__)

RequestHook = Callable[[RequestConfig], Union[RequestConfig, Awaitable[RequestConfig]]]
ResponseHook = Callable[[ResponseEnvelope], Union[ResponseEnvelope, Awaitable[ResponseEnvelope]]]
ErrorHook = Callable[..., Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Interceptor:
    """
    Базовый класс для интерсепторов.

    Переопределяйте только нужные хуки; непереопределённые хуки базового
    класса цепочка пропускает. Интерсептор разделяется всеми вызовами
    клиента, поэтому не храните в нём состояние конкретного запроса.

    Example:
        >>> class TraceInterceptor(Interceptor):
        ...     async def on_request(self, config):
        ...         return config.with_headers({"X-Trace-Id": new_trace_id()})
        ...
        ...     def on_error(self, error, config):
        ...         if getattr(error, "status", None) == 404:
        ...             return []  # пустой результат вместо ошибки
        ...         return None    # пропустить ошибку дальше
    """

    def on_request(self, config: RequestConfig) -> Union[RequestConfig, Awaitable[RequestConfig]]:
        """
        Вызывается перед каждой попыткой (включая повторные).

        Returns:
            RequestConfig (оригинальный или модифицированный)
        """
        return config

    def on_response(self, response: ResponseEnvelope) -> Union[ResponseEnvelope, Awaitable[ResponseEnvelope]]:
        """
        Вызывается после успешного (2xx) обмена.

        Returns:
            ResponseEnvelope (оригинальный или модифицированный)
        """
        return response

    def on_error(self, error: Exception, config: RequestConfig) -> Any:
        """
        Вызывается один раз, когда вызов завершается ошибкой окончательно.

        Returns:
            None - пропустить ошибку дальше; любое другое значение
            становится результатом вызова вместо ошибки.

        Raises:
            Любое исключение заменяет исходную ошибку.
        """
        return None

    def __repr__(self):
        return f"{self.__class__.__name__}()"


def _hook(interceptor: Any, name: str) -> Optional[Callable[..., Any]]:
    """Bound hook, or None when absent or left as the Interceptor no-op."""
    hook = getattr(interceptor, name, None)
    if hook is None or not callable(hook):
        return None

    if isinstance(interceptor, Interceptor):
        implementation = getattr(type(interceptor), name, None)
        if implementation is getattr(Interceptor, name):
            return None

    return hook


class RequestInterceptor(Interceptor):
    """
    Интерсептор из одной функции над RequestConfig.

    Example:
        >>> client.add_interceptor(RequestInterceptor(
        ...     lambda config: config.with_headers({"X-Test": "1"})
        ... ))
    """

    def __init__(self, handler: RequestHook):
        self._handler = handler

    def on_request(self, config):
        return self._handler(config)

    def __repr__(self):
        return f"RequestInterceptor({self._handler!r})"


class ResponseInterceptor(Interceptor):
    """
    Интерсептор над ResponseEnvelope и (опционально) над терминальной ошибкой.

    Args:
        handler: Функция над ResponseEnvelope
        error_handler: Функция ``(error, config)`` с семантикой on_error
    """

    def __init__(self, handler: Optional[ResponseHook] = None, error_handler: Optional[ErrorHook] = None):
        self._handler = handler
        self._error_handler = error_handler

    def on_response(self, response):
        if self._handler is None:
            return response
        return self._handler(response)

    def on_error(self, error, config):
        if self._error_handler is None:
            return None
        return self._error_handler(error, config)

    def __repr__(self):
        return f"ResponseInterceptor({self._handler!r}, {self._error_handler!r})"


class HeadersInterceptor(Interceptor):
    """
    Добавляет статические заголовки в каждую попытку.

    Args:
        headers: Заголовки; перезаписывают одноимённые (без учёта регистра)
    """

    def __init__(self, headers: Mapping[str, str]):
        self._headers = dict(headers)

    def on_request(self, config):
        return config.with_headers(self._headers)

    def __repr__(self):
        return f"HeadersInterceptor({sorted(self._headers)!r})"


@dataclass(frozen=True)
class ErrorResolution:
    """Result of an ``on_error`` hook that recovered a terminal failure."""
    value: Any
    interceptor: str


class InterceptorChain:
    """
    Упорядоченный список интерсепторов.

    Каждый проход по хукам итерирует снимок списка: add/remove во время
    выполнения влияют только на ещё не начатые проходы.

    Example:
        >>> chain = InterceptorChain([HeadersInterceptor({"X-Test": "1"})])
        >>> config = await chain.apply_request(RequestConfig("/data"))
    """

    def __init__(self, interceptors: Optional[List[Any]] = None):
        self._interceptors: List[Any] = list(interceptors or [])

    def add(self, interceptor: Any) -> None:
        """Добавить интерсептор в конец цепочки."""
        self._interceptors.append(interceptor)

    def remove(self, interceptor: Any) -> None:
        """Удалить интерсептор (no-op если его нет)."""
        if interceptor in self._interceptors:
            self._interceptors.remove(interceptor)

    def clear(self) -> None:
        self._interceptors.clear()

    def __len__(self) -> int:
        return len(self._interceptors)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._interceptors))

    def __contains__(self, interceptor: Any) -> bool:
        return interceptor in self._interceptors

    async def apply_request(self, config: RequestConfig) -> RequestConfig:
        """Прогнать config через все on_request по порядку."""
        for interceptor in list(self._interceptors):
            hook = _hook(interceptor, "on_request")
            if hook is None:
                continue

            result = await _maybe_await(hook(config))
            if not isinstance(result, RequestConfig):
                raise InterceptorError(type(interceptor).__name__, "on_request", result)
            config = result

        return config

    async def apply_response(self, response: ResponseEnvelope) -> ResponseEnvelope:
        """Прогнать envelope через все on_response по порядку."""
        for interceptor in list(self._interceptors):
            hook = _hook(interceptor, "on_response")
            if hook is None:
                continue

            result = await _maybe_await(hook(response))
            if not isinstance(result, ResponseEnvelope):
                raise InterceptorError(type(interceptor).__name__, "on_response", result)
            response = result

        return response

    async def apply_error(self, error: Exception, config: RequestConfig) -> ErrorResolution:
        """
        Дать on_error хукам последний шанс на терминальной ошибке.

        Returns:
            ErrorResolution, если какой-то хук вернул значение

        Raises:
            Исходную ошибку, или ту, которой её заменил хук
        """
        current = error

        for interceptor in list(self._interceptors):
            hook = _hook(interceptor, "on_error")
            if hook is None:
                continue

            try:
                result = await _maybe_await(hook(current, config))
            except Exception as replacement:
                logger.debug(
                    f"Interceptor {type(interceptor).__name__} replaced "
                    f"{type(current).__name__} with {type(replacement).__name__}"
                )
                current = replacement
                continue

            if result is not None:
                return ErrorResolution(value=result, interceptor=type(interceptor).__name__)

        raise current
