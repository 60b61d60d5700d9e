"""
Structured logs written by a client configured with its own logging.
"""

import json
import logging

import httpx
import pytest
import respx

from src.resilient_http import AsyncHTTPClient
from src.resilient_http.core.config import ClientConfig
from src.resilient_http.core.exceptions import HTTPStatusError
from src.resilient_http.core.logging import LoggingConfig
from src.resilient_http.core.logging.filters import set_correlation_id

URL = "https://api.example.com/orders?token=topsecret"


def _read_json_lines(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


@respx.mock
@pytest.mark.asyncio
async def test_json_file_logging_of_retries(tmp_path, recorded_waits):
    log_file = tmp_path / "client.log"
    logging_config = LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file),
    )
    config = ClientConfig.create(max_attempts=2, base_delay=0.1, logging=logging_config)
    respx.get(URL).mock(return_value=httpx.Response(500))

    set_correlation_id("req-42")
    async with AsyncHTTPClient(config=config) as client:
        with pytest.raises(HTTPStatusError):
            await client.get(URL)

    records = _read_json_lines(log_file)
    levels = [r["level"] for r in records]

    assert levels == ["DEBUG", "WARNING", "DEBUG", "ERROR"]
    assert all(r["correlation_id"] == "req-42" for r in records)
    assert records[1]["message"] == "Request failed, retrying"
    assert records[1]["attempt"] == 1
    assert records[1]["delay"] == 0.1
    assert records[3]["message"].startswith("[SYSTEM]")
    assert "topsecret" not in log_file.read_text(encoding="utf-8")


@respx.mock
@pytest.mark.asyncio
async def test_client_close_releases_logger(tmp_path):
    log_file = tmp_path / "client.log"
    logging_config = LoggingConfig.create(
        level="INFO", format="text", enable_console=False, enable_file=True, file_path=str(log_file)
    )
    respx.get(URL).mock(return_value=httpx.Response(200, json={}))

    package_handlers = list(logging.getLogger("resilient_http").handlers)

    async with AsyncHTTPClient(config=ClientConfig.create(logging=logging_config)) as client:
        await client.get(URL)
        stdlib_logger = client._logger.logger
        assert stdlib_logger.name.startswith("resilient_http.client")
        assert len(stdlib_logger.handlers) == 1

    assert stdlib_logger.handlers == []
    assert stdlib_logger.propagate is True
    assert logging.getLogger("resilient_http").handlers == package_handlers


@respx.mock
@pytest.mark.asyncio
async def test_clients_keep_separate_outputs(tmp_path, recorded_waits):
    respx.get(URL).mock(return_value=httpx.Response(404))

    def file_config(name):
        return ClientConfig.create(max_attempts=1, logging=LoggingConfig.create(
            format="json", enable_console=False, enable_file=True, file_path=str(tmp_path / name),
        ))

    first = AsyncHTTPClient(config=file_config("first.log"))
    second = AsyncHTTPClient(config=file_config("second.log"))

    async with second:
        async with first:
            with pytest.raises(HTTPStatusError):
                await first.get(URL)

        # closing the first client leaves the second one's handlers alone
        with pytest.raises(HTTPStatusError):
            await second.get(URL)

    first_records = _read_json_lines(tmp_path / "first.log")
    second_records = _read_json_lines(tmp_path / "second.log")

    assert [r["level"] for r in first_records] == ["ERROR"]
    assert [r["level"] for r in second_records] == ["ERROR"]
    assert first_records[0]["logger"] != second_records[0]["logger"]
