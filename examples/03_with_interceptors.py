"""
Interceptor Examples

Demonstrates request, response and error hooks.
"""

import asyncio
import uuid

from src.resilient_http import (
    AsyncHTTPClient,
    HeadersInterceptor,
    HTTPStatusError,
    Interceptor,
    ResponseInterceptor,
)


class TraceInterceptor(Interceptor):
    """Fresh trace id on every attempt."""

    async def on_request(self, config):
        return config.with_headers({"X-Trace-Id": uuid.uuid4().hex})


class EmptyOnNotFound(Interceptor):
    """Turn a final 404 into an empty list."""

    def on_error(self, error, config):
        if isinstance(error, HTTPStatusError) and error.status == 404:
            return []
        return None


async def main():
    interceptors = [
        HeadersInterceptor({"User-Agent": "resilient-http-example"}),
        TraceInterceptor(),
        ResponseInterceptor(lambda r: r.replace(data=r.data.get("headers", r.data))),
        EmptyOnNotFound(),
    ]

    async with AsyncHTTPClient("https://httpbin.org", interceptors=interceptors) as client:
        headers = await client.get("/headers")
        print(f"Trace id sent: {headers.get('X-Trace-Id')}")

        items = await client.get("/status/404")
        print(f"404 resolved to: {items!r}")


if __name__ == "__main__":
    asyncio.run(main())
