"""
Request executor: exactly one network exchange per call.

Translates httpx failures into the library's exceptions:
- expired per-attempt timeout -> RequestTimeoutError (code TIMEOUT, status 408)
- other transport failures -> NetworkError
- non-2xx status -> HTTPStatusError carrying the parsed body
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Union

import httpx

from .exceptions import HTTPStatusError, NetworkError, RequestTimeoutError
from .models import HttpMethod, RequestConfig, ResponseEnvelope

logger = logging.getLogger(__name__)


def serialize_body(body: Any) -> Optional[Union[str, bytes]]:
    """
    Serialise a request body to text.

    ``None`` means no body; str/bytes are sent as is; anything else is JSON.
    """
    if body is None:
        return None
    if isinstance(body, (str, bytes)):
        return body
    return json.dumps(body, default=str)


def parse_body(response: httpx.Response) -> Any:
    """
    Parse a response body.

    JSON when ``content-type`` says so; otherwise text, with a best-effort
    JSON parse for text that happens to be valid JSON.
    """
    content_type = response.headers.get("content-type", "")

    if "json" in content_type.lower():
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.debug("Response declared JSON but failed to parse, returning text")
            return response.text

    text = response.text
    if not text:
        return text

    try:
        return json.loads(text)
    except ValueError:
        return text


class RequestExecutor:
    """
    Выполняет один обмен с ограничением по времени.

    Args:
        client: httpx.AsyncClient (транспорт предоставляет окружение)

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     executor = RequestExecutor(http)
        ...     envelope = await executor.execute(RequestConfig("https://api.example.com/data", timeout=5))
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def execute(self, config: RequestConfig) -> ResponseEnvelope:
        """
        Выполнить обмен.

        Raises:
            RequestTimeoutError: Таймаут попытки
            NetworkError: Сбой транспорта
            HTTPStatusError: Статус вне 2xx
        """
        try:
            if config.timeout is not None:
                response = await asyncio.wait_for(self._send(config), timeout=config.timeout)
            else:
                response = await self._send(config)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(config.url, config.timeout) from e
        except httpx.TransportError as e:
            raise NetworkError(str(e) or "Network error", config.url, code=type(e).__name__) from e

        data = parse_body(response)

        if not response.is_success:
            raise HTTPStatusError(
                response.status_code,
                response.reason_phrase,
                response=data,
                headers=response.headers,
                url=config.url,
            )

        return ResponseEnvelope(
            data=data,
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            config=config,
        )

    async def _send(self, config: RequestConfig) -> httpx.Response:
        content = None
        if config.method is not HttpMethod.GET:
            content = serialize_body(config.body)

        kwargs: Dict[str, Any] = {"headers": dict(config.headers), "content": content}
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout

        return await self._client.request(config.method.value, config.url, **kwargs)
