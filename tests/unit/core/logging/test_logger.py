"""
Tests for ClientLogger and create_logger.
"""

import json
import logging

import pytest

from src.resilient_http.core.logging.config import LoggingConfig
from src.resilient_http.core.logging.filters import set_correlation_id
from src.resilient_http.core.logging.logger import DEFAULT_LOGGER_NAME, ClientLogger, create_logger
from src.resilient_http.utils.sanitizer import DEFAULT_MASK


class TestWithoutConfig:
    """Without config the logger only wraps logging.getLogger()."""

    def test_wraps_named_logger(self):
        logger = ClientLogger(name="resilient_http.tests.plain")

        assert logger.logger is logging.getLogger("resilient_http.tests.plain")
        assert logger.logger.propagate is True
        assert logger.logger.handlers == []

    def test_default_name(self):
        assert create_logger().name == DEFAULT_LOGGER_NAME

    def test_fields_reach_record(self, caplog):
        logger = ClientLogger(name="resilient_http.tests.fields")

        with caplog.at_level(logging.WARNING, logger="resilient_http.tests.fields"):
            logger.warning("Request failed, retrying", attempt=1, delay=0.1)

        record = caplog.records[-1]
        assert record.getMessage() == "Request failed, retrying"
        assert record.attempt == 1
        assert record.delay == 0.1

    def test_message_masked(self, caplog):
        logger = ClientLogger(name="resilient_http.tests.mask_message")

        with caplog.at_level(logging.ERROR, logger="resilient_http.tests.mask_message"):
            logger.error("[NETWORK] | Message: refused (url: https://api.example.com/x?token=abc123)")

        message = caplog.records[-1].getMessage()
        assert "abc123" not in message
        assert f"token={DEFAULT_MASK}" in message

    def test_disabled_level_not_emitted(self, caplog):
        logger = ClientLogger(name="resilient_http.tests.disabled")

        with caplog.at_level(logging.WARNING, logger="resilient_http.tests.disabled"):
            logger.debug("Sending request", attempt=1)

        assert caplog.records == []

    def test_sensitive_fields_masked(self, caplog):
        logger = ClientLogger(name="resilient_http.tests.mask")

        with caplog.at_level(logging.INFO, logger="resilient_http.tests.mask"):
            logger.info(
                "Sending request",
                headers={"Authorization": "Bearer abc", "Accept": "application/json"},
                api_key="secret",
            )

        record = caplog.records[-1]
        assert record.headers == {"Authorization": DEFAULT_MASK, "Accept": "application/json"}
        assert record.api_key == DEFAULT_MASK

    def test_reserved_field_names_renamed(self, caplog):
        logger = ClientLogger(name="resilient_http.tests.reserved")

        with caplog.at_level(logging.INFO, logger="resilient_http.tests.reserved"):
            logger.info("Request completed", name="orders", module="billing")

        record = caplog.records[-1]
        assert record.field_name == "orders"
        assert record.field_module == "billing"

    @pytest.mark.parametrize("level", ["ERROR", logging.ERROR])
    def test_generic_log(self, caplog, level):
        logger = ClientLogger(name="resilient_http.tests.generic")

        with caplog.at_level(logging.DEBUG, logger="resilient_http.tests.generic"):
            logger.log(level, "Request failed", status_code=503)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.status_code == 503

    def test_close_leaves_application_handlers(self):
        logger = ClientLogger(name="resilient_http.tests.app_handlers")
        handler = logging.NullHandler()
        logger.logger.addHandler(handler)
        try:
            logger.close()
            assert handler in logger.logger.handlers
        finally:
            logger.logger.removeHandler(handler)


class TestWithConfig:

    def test_installs_handlers(self):
        logger = ClientLogger(LoggingConfig.create(level="DEBUG"), name="resilient_http.tests.configured")
        try:
            assert logger.logger.level == logging.DEBUG
            assert logger.logger.propagate is False
            assert len(logger.logger.handlers) == 1
            assert logger.is_enabled_for("DEBUG") is True
        finally:
            logger.close()

    def test_json_file_output(self, tmp_path):
        path = tmp_path / "client.log"
        config = LoggingConfig.create(
            level="INFO",
            format="json",
            enable_console=False,
            enable_file=True,
            file_path=str(path),
            extra_fields={"service": "billing"},
        )

        set_correlation_id("req-7")
        with create_logger(config, name="resilient_http.tests.file") as logger:
            logger.debug("not written")
            logger.warning("Request failed, retrying", attempt=2, token="abc")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1

        data = json.loads(lines[0])
        assert data["message"] == "Request failed, retrying"
        assert data["attempt"] == 2
        assert data["token"] == DEFAULT_MASK
        assert data["service"] == "billing"
        assert data["correlation_id"] == "req-7"

    def test_close_is_idempotent(self):
        logger = ClientLogger(LoggingConfig(), name="resilient_http.tests.close")

        logger.close()
        logger.close()

        assert logger.logger.handlers == []
