"""
Retry Examples

Demonstrates retry policies, exponential backoff and category whitelists.
"""

import asyncio

from src.resilient_http import (
    AsyncHTTPClient,
    ErrorCategory,
    HTTPStatusError,
    NetworkError,
    RetryPolicy,
    RetryPolicyEvaluator,
)


async def basic_retry():
    """5xx responses are retried with exponential backoff."""
    print("\n=== Basic Retry ===")

    policy = RetryPolicy(max_attempts=3, base_delay=0.5)

    async with AsyncHTTPClient("https://httpbin.org", retry_policy=policy) as client:
        try:
            await client.get("/status/503")
        except HTTPStatusError as e:
            print(f"Failed after {policy.max_attempts} attempts: {e}")


def show_backoff():
    """Delays produced by a policy."""
    print("\n=== Backoff schedule ===")

    policy = RetryPolicy(max_attempts=6, base_delay=1.0, max_delay=10.0)
    delays = [RetryPolicyEvaluator.calculate_delay(a, policy) for a in range(1, 6)]
    print(f"Exponential: {delays}")  # [1.0, 2.0, 4.0, 8.0, 10.0]

    constant = RetryPolicy(max_attempts=6, base_delay=2.0, exponential_backoff=False)
    print(f"Constant: {[RetryPolicyEvaluator.calculate_delay(a, constant) for a in range(1, 6)]}")


async def network_only():
    """Only NETWORK failures are retried; server errors fail fast."""
    print("\n=== Whitelist ===")

    policy = RetryPolicy(max_attempts=4, base_delay=0.2, retryable_categories=[ErrorCategory.NETWORK])

    async with AsyncHTTPClient("https://httpbin.org", timeout=1, retry_policy=policy) as client:
        try:
            await client.get("/status/500")
        except HTTPStatusError as e:
            print(f"Not retried: {e}")

        try:
            await client.get("/delay/3")
        except NetworkError as e:
            print(f"Timed out {policy.max_attempts} times: {e}")


async def main():
    await basic_retry()
    show_backoff()
    await network_only()


if __name__ == "__main__":
    asyncio.run(main())
