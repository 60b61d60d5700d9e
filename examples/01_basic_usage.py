"""
Basic Usage Examples

Demonstrates simple GET/POST requests with AsyncHTTPClient.
"""

import asyncio

from src.resilient_http import AsyncHTTPClient, HTTPStatusError


async def simple_get():
    """Simple GET request."""
    print("\n=== Simple GET ===")

    async with AsyncHTTPClient("https://httpbin.org", timeout=10) as client:
        data = await client.get("/get", headers={"X-Example": "basic"})
        print(f"Echoed headers: {data['headers']}")


async def post_json():
    """POST with a JSON body."""
    print("\n=== POST JSON ===")

    async with AsyncHTTPClient("https://httpbin.org") as client:
        data = await client.post("/post", {"name": "alice", "role": "admin"})
        print(f"Server received: {data['json']}")


async def handle_business_error():
    """4xx responses are not retried and surface as HTTPStatusError."""
    print("\n=== Business error ===")

    async with AsyncHTTPClient("https://httpbin.org") as client:
        try:
            await client.get("/status/404")
        except HTTPStatusError as e:
            print(f"Failed once, no retry: {e} (status={e.status})")


async def main():
    await simple_get()
    await post_json()
    await handle_business_error()


if __name__ == "__main__":
    asyncio.run(main())
