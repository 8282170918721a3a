"""
Tests for exception hierarchy and error classification.
"""

import aiohttp
import pytest

from refresh_fetch.errors.exceptions import (
    AuthError,
    ErrorCategory,
    FetchError,
    JSONParseError,
    PermanentError,
    ResponseError,
    auth_failure_predicate,
    classify_http_status,
    is_auth_error,
)


class TestFetchError:
    """Test base FetchError class."""

    def test_basic_error(self):
        err = FetchError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.cause is None
        assert err.context == {}
        assert err.category == ErrorCategory.UNKNOWN

    def test_error_with_cause(self):
        cause = ValueError("Invalid value")
        err = FetchError("Wrapper message", cause=cause)
        assert err.cause == cause
        assert "Caused by" in str(err)

    def test_should_refresh_auth(self):
        assert AuthError("expired").should_refresh_auth is True
        assert FetchError("Error").should_refresh_auth is False


class TestResponseError:

    def test_attributes_and_message(self):
        response = object()
        err = ResponseError(404, response, {"error": "Not found", "code": 404})

        assert err.status == 404
        assert err.response is response
        assert err.body == {"error": "Not found", "code": 404}
        assert str(err) == "HTTP 404 Error"

    @pytest.mark.parametrize(
        "status,category",
        [
            (401, ErrorCategory.AUTH),
            (403, ErrorCategory.PERMANENT),
            (429, ErrorCategory.TRANSIENT),
            (503, ErrorCategory.TRANSIENT),
        ],
    )
    def test_category_follows_status(self, status, category):
        assert ResponseError(status, None).category == category

    def test_category_is_per_instance(self):
        auth = ResponseError(401, None)
        missing = ResponseError(404, None)
        assert auth.should_refresh_auth is True
        assert missing.should_refresh_auth is False


class TestJSONParseError:

    def test_message_includes_text(self):
        err = JSONParseError("{ invalid json }")
        assert str(err) == "Failed to parse unexpected JSON response: { invalid json }"
        assert err.text == "{ invalid json }"
        assert err.category == ErrorCategory.PERMANENT


class TestClassifyHttpStatus:

    @pytest.mark.parametrize(
        "status,category",
        [
            (200, ErrorCategory.UNKNOWN),
            (204, ErrorCategory.UNKNOWN),
            (302, ErrorCategory.AUTH),
            (401, ErrorCategory.AUTH),
            (400, ErrorCategory.PERMANENT),
            (404, ErrorCategory.PERMANENT),
            (422, ErrorCategory.PERMANENT),
            (429, ErrorCategory.TRANSIENT),
            (500, ErrorCategory.TRANSIENT),
            (504, ErrorCategory.TRANSIENT),
            (599, ErrorCategory.TRANSIENT),
        ],
    )
    def test_classification(self, status, category):
        assert classify_http_status(status) == category


class TestIsAuthError:

    def test_typed_errors(self):
        assert is_auth_error(AuthError("expired")) is True
        assert is_auth_error(ResponseError(401, None)) is True
        assert is_auth_error(ResponseError(500, None)) is False

    def test_untyped_errors_never_match(self):
        assert is_auth_error(Exception("Token expired")) is False
        assert is_auth_error(Exception("401 Unauthorized")) is False
        assert is_auth_error(ValueError("bad")) is False

    def test_connection_errors_mentioning_401_do_not_match(self):
        refused = ConnectionRefusedError(
            111, "Connect call failed ('127.0.0.1', 4010)"
        )
        assert is_auth_error(refused) is False
        assert is_auth_error(aiohttp.ClientConnectionError("http://host:8401/")) is False
        assert is_auth_error(TimeoutError("GET /v1/orders/401 timed out")) is False

    def test_non_auth_typed_errors(self):
        assert is_auth_error(PermanentError("gone")) is False
        assert is_auth_error(JSONParseError("{")) is False


class TestAuthFailurePredicate:

    def test_default_matches_401_only(self):
        predicate = auth_failure_predicate()
        assert predicate(ResponseError(401, None)) is True
        assert predicate(ResponseError(403, None)) is False
        assert predicate(ResponseError(500, None)) is False

    def test_custom_status_codes(self):
        predicate = auth_failure_predicate([401, 419])
        assert predicate(ResponseError(419, None)) is True
        assert predicate(ResponseError(302, None)) is False

    def test_auth_error_matches(self):
        assert auth_failure_predicate()(AuthError("expired")) is True

    def test_untyped_errors_do_not_match(self):
        predicate = auth_failure_predicate()
        assert predicate(Exception("401 Unauthorized")) is False
        assert predicate(ValueError("bad")) is False

