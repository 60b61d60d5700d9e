# src/resilient_http/async_client.py
"""
Асинхронный HTTP клиент на базе httpx.

Фасад над ядром: собирает эффективный RequestConfig, прогоняет
интерсепторы, вызывает RequestExecutor и повторяет попытки по решению
RetryPolicyEvaluator. Возвращает распакованный payload или поднимает
финальную ошибку.
"""

import itertools
from dataclasses import fields
from typing import Any, Dict, Iterable, List, Optional, Union

import httpx

from .core.classifier import ErrorClassification
from .core.config import ClientConfig, DEFAULT_RETRY_POLICY, DEFAULT_TIMEOUT, RetryPolicy
from .core.error_formatter import format_log_message
from .core.exceptions import ConfigurationError
from .core.executor import RequestExecutor
from .core.interceptors import InterceptorChain
from .core.logging import DEFAULT_LOGGER_NAME, ClientLogger, create_logger
from .core.models import HttpMethod, RequestConfig, merge_headers
from .core.retry_policy import RetryPolicyEvaluator
from .core.settings import ConfigService
from .core.utils import is_absolute_url, resolve_url, sanitize_url

_REQUEST_OPTIONS = frozenset(f.name for f in fields(RequestConfig)) - {"url"}
_client_ids = itertools.count(1)


class AsyncHTTPClient:
    """
    Асинхронный HTTP клиент с retry и интерсепторами.

    Example:
        >>> async with AsyncHTTPClient("https://api.example.com", timeout=5) as client:
        ...     users = await client.get("/users")
        ...     created = await client.post("/users", body={"name": "alice"})

        >>> # Или без context manager
        >>> client = AsyncHTTPClient(config=ClientConfig.create(max_attempts=5))
        >>> data = await client.get("https://api.example.com/data")
        >>> await client.close()

    Клиент можно разделять между конкурентными задачами: состояние
    вызова (номер попытки, эффективный конфиг) живёт в локальных
    переменных ``request``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
        headers: Optional[Dict[str, str]] = None,
        interceptors: Optional[Iterable[Any]] = None,
        logger: Optional[ClientLogger] = None,
        settings: Optional[ConfigService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Инициализация клиента.

        Args:
            base_url: Базовый URL для относительных путей
            config: ClientConfig (если указан, остальные параметры конфигурации игнорируются)
            timeout: Таймаут одной попытки (сек)
            retry_policy: Политика retry по умолчанию
            headers: Заголовки по умолчанию (мержатся поверх DEFAULT_HEADERS)
            interceptors: Интерсепторы в порядке выполнения
            logger: ClientLogger (по умолчанию строится из config.logging;
                с LoggingConfig клиент пишет в свой логгер resilient_http.clientN)
            settings: ConfigService, из которого берутся незаданные base_url,
                timeout и параметры retry
            transport: httpx транспорт для лениво создаваемого AsyncClient
            http_client: Готовый httpx.AsyncClient (клиент его не закрывает)
        """
        if config is None:
            config = self._config_from_arguments(base_url, timeout, retry_policy, headers, settings)
        self._config = config

        self._interceptors = InterceptorChain(list(interceptors or []))
        self._evaluator = RetryPolicyEvaluator()

        self._owns_logger = logger is None
        if logger is None:
            # С LoggingConfig у каждого клиента свой логгер и свои handlers
            name = DEFAULT_LOGGER_NAME
            if config.logging is not None:
                name = f"{DEFAULT_LOGGER_NAME}.client{next(_client_ids)}"
            logger = create_logger(config.logging, name=name)
        self._logger = logger

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None
        self._executor: Optional[RequestExecutor] = None

    @staticmethod
    def _config_from_arguments(
        base_url: Optional[str],
        timeout: Optional[float],
        retry_policy: Optional[RetryPolicy],
        headers: Optional[Dict[str, str]],
        settings: Optional[ConfigService],
    ) -> ClientConfig:
        if settings is not None:
            if base_url is None:
                base_url = settings.get_optional("http.base_url")
            if timeout is None:
                timeout = settings.get("http.default_timeout", DEFAULT_TIMEOUT)
            if retry_policy is None:
                defaults = DEFAULT_RETRY_POLICY
                retry_policy = RetryPolicy(
                    max_attempts=settings.get("http.default_retry_attempts", defaults.max_attempts),
                    base_delay=settings.get("http.default_retry_delay", defaults.base_delay),
                    max_delay=defaults.max_delay,
                    exponential_backoff=defaults.exponential_backoff,
                )

        config = ClientConfig.create(
            base_url=base_url,
            timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
            headers=headers,
        )
        if retry_policy is not None:
            config = config.with_retry_policy(retry_policy)
        return config

    # ==================== Properties ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> Optional[str]:
        return self._config.base_url

    @property
    def interceptors(self) -> List[Any]:
        """Снимок списка интерсепторов."""
        return list(self._interceptors)

    def add_interceptor(self, interceptor: Any) -> None:
        """
        Добавить интерсептор в конец цепочки.

        Действует для последующих вызовов и ещё не начатых попыток
        текущих вызовов.
        """
        self._interceptors.add(interceptor)

    def remove_interceptor(self, interceptor: Any) -> None:
        """Удалить интерсептор (no-op если его нет)."""
        self._interceptors.remove(interceptor)

    # ==================== Lifecycle ====================

    def _get_executor(self) -> RequestExecutor:
        """Получить или создать httpx клиент и executor."""
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport)
        if self._executor is None:
            self._executor = RequestExecutor(self._client)
        return self._executor

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Async context manager entry."""
        self._get_executor()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Закрыть клиент и освободить ресурсы."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        self._executor = None

        if self._owns_logger:
            self._logger.close()

    # ==================== HTTP методы ====================

    async def request(self, config: Union[RequestConfig, str], **overrides: Any) -> Any:
        """
        Выполнить запрос с retry логикой.

        Args:
            config: RequestConfig или URL (относительный или абсолютный)
            **overrides: Поля RequestConfig (method, headers, body, timeout, retry_policy)

        Returns:
            Распакованный payload ответа (или значение, которым on_error
            интерсептор заменил ошибку)

        Raises:
            ConfigurationError: Невалидный конфиг (до первой попытки)
            RequestTimeoutError: Таймаут последней попытки
            NetworkError: Сбой транспорта на последней попытке
            HTTPStatusError: Статус вне 2xx на последней попытке
        """
        effective = self._build_config(config, overrides)
        policy = effective.retry_policy
        executor = self._get_executor()
        url = sanitize_url(effective.url)

        attempt = 1
        while True:
            self._logger.debug(
                "Sending request",
                method=effective.method.value,
                url=url,
                attempt=attempt,
                max_attempts=policy.max_attempts,
            )

            try:
                prepared = await self._interceptors.apply_request(effective)
                envelope = await executor.execute(prepared)
                envelope = await self._interceptors.apply_response(envelope)
                return envelope.data
            except Exception as e:
                error = e
                info = self._evaluator.classify(error)

                if not self._evaluator.should_retry(info, attempt, policy):
                    self._log_failure(info, effective, attempt)
                    break

                delay = self._evaluator.get_delay(info, attempt, policy)
                self._logger.warning(
                    "Request failed, retrying",
                    method=effective.method.value,
                    url=url,
                    attempt=attempt,
                    max_attempts=policy.max_attempts,
                    delay=delay,
                    category=info.category.value,
                    status_code=info.status_code,
                )

            await self._evaluator.async_wait(delay)
            attempt += 1

        resolution = await self._interceptors.apply_error(error, effective)
        self._logger.info(
            "Request failure resolved by interceptor",
            method=effective.method.value,
            url=url,
            interceptor=resolution.interceptor,
        )
        return resolution.value

    def _build_config(self, config: Union[RequestConfig, str], overrides: Dict[str, Any]) -> RequestConfig:
        """
        Собрать эффективный конфиг: URL, заголовки, timeout и политика
        разрешены до первой попытки.
        """
        unknown = set(overrides) - _REQUEST_OPTIONS
        if unknown:
            raise ConfigurationError(f"Unknown request options: {sorted(unknown)}")

        if isinstance(config, RequestConfig):
            if overrides:
                config = config.replace(**overrides)
        else:
            config = RequestConfig(url=config, **overrides)

        url = resolve_url(config.url, self._config.base_url)
        if not is_absolute_url(url):
            raise ConfigurationError(
                f"Cannot resolve relative URL {config.url!r} without a base_url"
            )

        return config.replace(
            url=url,
            headers=merge_headers(self._config.headers, config.headers),
            timeout=self._config.timeout if config.timeout is None else config.timeout,
            retry_policy=config.retry_policy or self._config.retry,
        )

    def _log_failure(self, info: ErrorClassification, config: RequestConfig, attempt: int) -> None:
        operation = f"{config.method.value} {sanitize_url(config.url)}"
        self._logger.error(
            format_log_message(info, {"service": "AsyncHTTPClient", "operation": operation}),
            attempt=attempt,
            category=info.category.value,
            status_code=info.status_code,
            error_code=info.error_code,
        )

    # ==================== Удобные методы ====================

    async def get(self, url: str, **overrides: Any) -> Any:
        """GET запрос."""
        return await self.request(url, method=HttpMethod.GET, **overrides)

    async def delete(self, url: str, **overrides: Any) -> Any:
        """DELETE запрос."""
        return await self.request(url, method=HttpMethod.DELETE, **overrides)

    async def post(self, url: str, body: Any = None, **overrides: Any) -> Any:
        """POST запрос."""
        return await self.request(url, method=HttpMethod.POST, body=body, **overrides)

    async def put(self, url: str, body: Any = None, **overrides: Any) -> Any:
        """PUT запрос."""
        return await self.request(url, method=HttpMethod.PUT, body=body, **overrides)

    async def patch(self, url: str, body: Any = None, **overrides: Any) -> Any:
        """PATCH запрос."""
        return await self.request(url, method=HttpMethod.PATCH, body=body, **overrides)

    def __repr__(self):
        return f"AsyncHTTPClient(base_url={self.base_url!r}, interceptors={len(self._interceptors)})"
