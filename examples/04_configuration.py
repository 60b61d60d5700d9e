"""
Configuration Examples

Demonstrates environment variables, YAML files and structured logging.
"""

import asyncio
import os
import tempfile

from src.resilient_http import AsyncHTTPClient, ClientSettings, load_client_config
from src.resilient_http.core.settings import FileConfigProvider, create_default_config_service


async def from_environment():
    """RESILIENT_HTTP_* variables via pydantic-settings."""
    print("\n=== Environment ===")

    os.environ["RESILIENT_HTTP_BASE_URL"] = "https://httpbin.org"
    os.environ["RESILIENT_HTTP_RETRY_MAX_ATTEMPTS"] = "2"
    os.environ["RESILIENT_HTTP_LOG_ENABLED"] = "true"
    os.environ["RESILIENT_HTTP_LOG_FORMAT"] = "colored"

    config = load_client_config(ClientSettings())
    print(f"Loaded: base_url={config.base_url} retry={config.retry}")

    async with AsyncHTTPClient(config=config) as client:
        await client.get("/get")


async def from_yaml_file():
    """Layered providers: memory > file > environment > defaults."""
    print("\n=== YAML file ===")

    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as f:
        f.write("http:\n  base_url: https://httpbin.org\n  default_timeout: 5\n")
        f.write("logging:\n  level: DEBUG\n  format: json\n")

    service = create_default_config_service(FileConfigProvider(f.name))
    service.set("http.default_retry_attempts", 4)

    config = load_client_config(service)
    print(f"Timeout: {config.timeout}, attempts: {config.retry.max_attempts}")

    async with AsyncHTTPClient(config=config) as client:
        await client.get("/uuid")

    os.unlink(f.name)


async def main():
    await from_environment()
    await from_yaml_file()


if __name__ == "__main__":
    asyncio.run(main())
