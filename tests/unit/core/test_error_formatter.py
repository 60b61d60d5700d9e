"""Тесты форматирования ErrorClassification."""

import json

from src.resilient_http.core.classifier import classify
from src.resilient_http.core.error_formatter import (
    format_log_message,
    format_report,
    format_user_message,
)
from src.resilient_http.core.exceptions import HTTPStatusError, NetworkError


def test_user_message_for_transient_categories():
    assert format_user_message(classify(NetworkError("down"))).startswith("Network error")
    assert format_user_message(classify({"status": 503})) == "A system error occurred. Please try again later."


def test_user_message_uses_own_message_for_business():
    info = classify({"status": 409, "message": "Order already shipped"})
    assert format_user_message(info) == "Order already shipped"


def test_log_message_layout():
    info = classify(HTTPStatusError(404, "Not Found"))

    line = format_log_message(info, {"service": "orders", "operation": "GET /orders/1", "user": "42"})

    assert line == (
        "[BUSINESS] | Service: orders | Operation: GET /orders/1 | Status: 404 "
        "| Message: HTTP 404 Not Found | Data: user=42"
    )


def test_log_message_with_code_and_no_context():
    info = classify({"code": "ECONNREFUSED", "message": "connect failed"})

    assert format_log_message(info) == "[NETWORK] | Code: ECONNREFUSED | Message: connect failed"


def test_report_is_json_serialisable():
    info = classify(HTTPStatusError(429, headers={"Retry-After": "4"}))

    report = format_report(info, {"operation": "sync"})

    assert report["category"] == "BUSINESS"
    assert report["status_code"] == 429
    assert report["retry_after"] == 4.0
    assert report["should_retry"] is True
    assert report["context"] == {"operation": "sync"}
    json.dumps(report)
