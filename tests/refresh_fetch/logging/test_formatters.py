"""Tests for JSON and console log formatters."""

import json
import logging
import sys
import pytest

from refresh_fetch.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from refresh_fetch.logging.formatters import ConsoleFormatter, JSONFormatter


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def clear_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContext:

    def test_defaults_empty(self):
        assert get_log_context() == {"request_id": "", "trace_id": ""}

    def test_set_only_given_values(self):
        set_log_context(request_id="req-1")
        set_log_context(trace_id="trace-1")
        assert get_log_context() == {"request_id": "req-1", "trace_id": "trace-1"}


class TestJSONFormatter:

    def test_formats_basic_json_with_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")
        assert "file" not in output

    def test_includes_context(self):
        set_log_context(request_id="req-123", trace_id="trace-9")
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["request_id"] == "req-123"
        assert output["trace_id"] == "trace-9"

    def test_empty_context_omitted(self):
        output = json.loads(JSONFormatter().format(_make_record()))
        assert "request_id" not in output
        assert "trace_id" not in output

    def test_extras_override_context(self):
        set_log_context(request_id="from-context")
        record = _make_record(request_id="from-record")

        output = json.loads(JSONFormatter().format(record))

        assert output["request_id"] == "from-record"

    def test_includes_extra_fields(self):
        record = _make_record(
            operation="refresh_fetch",
            http_method="GET",
            error_type="ResponseError",
        )

        output = json.loads(JSONFormatter().format(record))

        assert output["operation"] == "refresh_fetch"
        assert output["http_method"] == "GET"
        assert output["error_type"] == "ResponseError"

    def test_ignores_unknown_extras(self):
        output = json.loads(JSONFormatter().format(_make_record(custom="x")))
        assert "custom" not in output

    def test_numeric_fields_coerced(self):
        record = _make_record(http_status="401", duration_ms="12.5")

        output = json.loads(JSONFormatter().format(record))

        assert output["http_status"] == 401
        assert output["duration_ms"] == 12.5

    def test_unparseable_numeric_field_is_null(self):
        output = json.loads(JSONFormatter().format(_make_record(http_status="bad")))
        assert output["http_status"] is None

    def test_sanitizes_url_tokens(self):
        record = _make_record(http_url="https://api.example.com/me?access_token=abc&page=2")

        output = json.loads(JSONFormatter().format(record))

        assert output["http_url"] == "https://api.example.com/me?access_token=[REDACTED]&page=2"

    @pytest.mark.parametrize("level", [logging.DEBUG, logging.ERROR, logging.CRITICAL])
    def test_file_location_for_debug_and_errors(self, level):
        output = json.loads(JSONFormatter().format(_make_record(level=level)))
        assert output["file"] == "test.py:42"

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "RuntimeError"
        assert output["exception"]["message"] == "boom"
        assert "Traceback" in output["exception"]["stacktrace"]


class TestConsoleFormatter:

    def _formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_plain_output_without_tty(self):
        output = self._formatter().format(_make_record())

        assert " - INFO - test.logger - test message" in output
        assert "\033[" not in output

    def test_colors_on_tty(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True

        output = formatter.format(_make_record(level=logging.WARNING))

        assert "\033[33mWARNING\033[0m" in output

    def test_request_id_prefix_truncated(self):
        set_log_context(request_id="abcdef1234567890")

        output = self._formatter().format(_make_record())

        assert output.endswith("[abcdef12] test message")

    def test_appends_exception(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = self._formatter().format(record)

        assert "ValueError: bad value" in output
