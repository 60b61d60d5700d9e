"""Тесты RequestConfig, ResponseEnvelope и merge_headers."""

import dataclasses

import pytest

from src.resilient_http.core.config import RetryPolicy
from src.resilient_http.core.exceptions import ConfigurationError
from src.resilient_http.core.models import HttpMethod, RequestConfig, ResponseEnvelope, merge_headers


class TestMergeHeaders:

    def test_override_wins_case_insensitive(self):
        merged = merge_headers({"Accept": "text/plain", "X-A": "1"}, {"accept": "application/json"})
        assert merged == {"X-A": "1", "accept": "application/json"}

    def test_none_inputs(self):
        assert merge_headers(None, None) == {}
        assert merge_headers({"A": "1"}, None) == {"A": "1"}

    def test_inputs_not_modified(self):
        base = {"A": "1"}
        merge_headers(base, {"a": "2"})
        assert base == {"A": "1"}


class TestHttpMethod:

    @pytest.mark.parametrize("value", ["get", "GET", "Get", HttpMethod.GET])
    def test_parse(self, value):
        assert HttpMethod.parse(value) is HttpMethod.GET

    @pytest.mark.parametrize("value", ["TRACE", "", "fetch"])
    def test_unsupported(self, value):
        with pytest.raises(ConfigurationError):
            HttpMethod.parse(value)


class TestRequestConfig:

    def test_defaults(self):
        config = RequestConfig("https://api.example.com/data")

        assert config.method is HttpMethod.GET
        assert dict(config.headers) == {}
        assert config.body is None
        assert config.timeout is None
        assert config.retry_policy is None

    def test_method_normalised(self):
        assert RequestConfig("/x", "post").method is HttpMethod.POST

    def test_unsupported_method(self):
        with pytest.raises(ConfigurationError):
            RequestConfig("/x", "TRACE")

    @pytest.mark.parametrize("url", ["", None, 42])
    def test_invalid_url(self, url):
        with pytest.raises(ConfigurationError):
            RequestConfig(url)

    @pytest.mark.parametrize("timeout", [0, -2])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ConfigurationError):
            RequestConfig("/x", timeout=timeout)

    def test_immutable(self):
        config = RequestConfig("/x", headers={"A": "1"})

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.url = "/y"
        with pytest.raises(TypeError):
            config.headers["B"] = "2"

    def test_with_headers(self):
        config = RequestConfig("/x", headers={"Accept": "text/plain"})

        updated = config.with_headers({"accept": "application/json", "X-Test": "1"})

        assert dict(updated.headers) == {"accept": "application/json", "X-Test": "1"}
        assert dict(config.headers) == {"Accept": "text/plain"}

    def test_get_header_case_insensitive(self):
        config = RequestConfig("/x", headers={"X-Trace-Id": "abc"})

        assert config.get_header("x-trace-id") == "abc"
        assert config.get_header("missing", "default") == "default"

    def test_replace(self):
        policy = RetryPolicy(max_attempts=1)
        config = RequestConfig("/x").replace(method="delete", retry_policy=policy)

        assert config.method is HttpMethod.DELETE
        assert config.retry_policy is policy


def test_response_envelope():
    request = RequestConfig("https://api.example.com/data")
    envelope = ResponseEnvelope(data={"ok": True}, status=200, status_text="OK",
                                headers={"content-type": "application/json"}, config=request)

    assert envelope.data == {"ok": True}
    assert envelope.headers["content-type"] == "application/json"
    assert envelope.replace(data=[1]).data == [1]
    assert envelope.data == {"ok": True}
