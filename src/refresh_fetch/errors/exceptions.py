"""
Exception hierarchy for refresh_fetch.

Provides typed exceptions classified by category, plus the predicates used
to decide whether a failed request should trigger re-authentication.
"""

from collections.abc import Callable, Iterable
from typing import Any

# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from refresh_fetch.types import ErrorCategory


class FetchError(Exception):
    """
    Base exception for all refresh_fetch errors.

    Attributes:
        message: Human-readable error description
        category: Error classification (AUTH triggers re-authentication)
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def should_refresh_auth(self) -> bool:
        return self.category == ErrorCategory.AUTH

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class AuthError(FetchError):
    """Base class for authentication errors."""

    category = ErrorCategory.AUTH


class PermanentError(FetchError):
    """Base class for permanent/non-retriable errors."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# HTTP Response Errors
# =============================================================================


class ResponseError(FetchError):
    """
    Non-2xx HTTP response.

    The category is derived from the status code, so a 401 is an AUTH error
    and a 503 is TRANSIENT.

    Attributes:
        status: HTTP status code
        response: The response object the error was raised for
        body: Parsed response body (dict/list for JSON, str otherwise, or None)
    """

    def __init__(
        self,
        status: int,
        response: Any,
        body: Any = None,
        context: dict | None = None,
    ):
        super().__init__(f"HTTP {status} Error", context=context)
        self.status = status
        self.response = response
        self.body = body
        self.category = classify_http_status(status)


class JSONParseError(PermanentError):
    """Response declared a JSON content type but the body did not parse."""

    def __init__(self, text: str, cause: BaseException | None = None):
        super().__init__(f"Failed to parse unexpected JSON response: {text}", cause)
        self.text = text

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Error Classification Utilities
# =============================================================================

DEFAULT_AUTH_STATUS_CODES = frozenset({401})


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify HTTP status code into error category."""
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    # Auth redirects (302 = redirect to login page)
    if status_code == 302:
        return ErrorCategory.AUTH

    if status_code == 401:
        return ErrorCategory.AUTH

    if status_code == 429:
        return ErrorCategory.TRANSIENT  # Rate limited

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT  # Client errors, won't fix with retry

    if status_code >= 500:
        return ErrorCategory.TRANSIENT  # Server errors, may recover

    return ErrorCategory.UNKNOWN


def is_auth_error(exc: BaseException) -> bool:
    """
    Check if exception is authentication-related.

    Returns True if this is an auth error that should trigger a credential
    refresh. Suitable as the coordinator's ``is_auth_failure`` predicate.

    Only typed errors qualify. Untyped exceptions (connection failures,
    timeouts) never trigger a refresh, whatever their message says.
    """
    if isinstance(exc, FetchError):
        return exc.category == ErrorCategory.AUTH
    return False


def auth_failure_predicate(
    status_codes: Iterable[int] = DEFAULT_AUTH_STATUS_CODES,
) -> Callable[[BaseException], bool]:
    """
    Build an auth-failure predicate keyed on HTTP status codes.

    The returned predicate matches ``ResponseError`` instances whose status is
    in ``status_codes`` and any ``AuthError``. Everything else is not an auth
    failure.

    Args:
        status_codes: Statuses that mean "credentials expired" (default: 401)

    Returns:
        Predicate usable as ``is_auth_failure``
    """
    statuses = frozenset(int(code) for code in status_codes)

    def predicate(error: BaseException) -> bool:
        if isinstance(error, ResponseError):
            return error.status in statuses
        return isinstance(error, AuthError)

    return predicate
