"""
Tests for log filters and the correlation ID context.
"""

import asyncio
import logging

import pytest

from src.resilient_http.core.logging.filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


def make_record():
    return logging.LogRecord("resilient_http", logging.INFO, "x.py", 1, "msg", (), None)


def test_correlation_id_roundtrip():
    assert get_correlation_id() is None

    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"

    clear_correlation_id()
    assert get_correlation_id() is None


def test_correlation_filter_adds_id():
    set_correlation_id("req-42")
    record = make_record()

    assert CorrelationIdFilter().filter(record) is True
    assert record.correlation_id == "req-42"


def test_correlation_filter_without_id():
    record = make_record()

    CorrelationIdFilter().filter(record)

    assert not hasattr(record, "correlation_id")


@pytest.mark.asyncio
async def test_correlation_id_isolated_between_tasks():
    async def worker(correlation_id):
        set_correlation_id(correlation_id)
        await asyncio.sleep(0)
        return get_correlation_id()

    results = await asyncio.gather(worker("a"), worker("b"), worker("c"))

    assert results == ["a", "b", "c"]
    assert get_correlation_id() is None


def test_extra_fields_filter_does_not_override():
    record = make_record()
    record.service = "explicit"

    ExtraFieldsFilter({"service": "default", "env": "test"}).filter(record)

    assert record.service == "explicit"
    assert record.env == "test"
