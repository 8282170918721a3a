"""
Error classification and exception hierarchy.

Provides:
- FetchError hierarchy for typed exceptions
- ResponseError for non-2xx HTTP responses
- Auth-failure predicates for the coordinator
"""

from refresh_fetch.errors.exceptions import (
    # Constants
    DEFAULT_AUTH_STATUS_CODES,
    # Base classes
    AuthError,
    FetchError,
    JSONParseError,
    PermanentError,
    # HTTP errors
    ResponseError,
    # Classification utilities
    auth_failure_predicate,
    classify_http_status,
    is_auth_error,
)
from refresh_fetch.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "FetchError",
    "AuthError",
    "PermanentError",
    # HTTP errors
    "ResponseError",
    "JSONParseError",
    # Classification utilities
    "is_auth_error",
    "auth_failure_predicate",
    "classify_http_status",
    # Constants
    "DEFAULT_AUTH_STATUS_CODES",
]
