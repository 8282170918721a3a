"""
Core types and protocols used across modules.

This module provides the error categories and the callable protocols that the
coordinator composes: the wrapped transport, the re-authentication routine and
the auth-failure predicate.
"""

from enum import Enum
from typing import Any, Awaitable, Protocol


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed on retry
                   (e.g., network timeouts, 429/503 responses)
        AUTH: Authentication failures requiring credential refresh
              (e.g., 401 responses, expired tokens)
        PERMANENT: Non-retriable failures that won't succeed on retry
                   (e.g., 404, validation errors, unparseable bodies)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class Transport(Protocol):
    """
    Protocol for request functions wrapped by the coordinator.

    Takes a resource locator plus an options mapping
    (``{"method": ..., "headers": ..., "body": ...}``) and signals failure
    by raising.
    """

    def __call__(self, url: str, *args: Any, **kwargs: Any) -> Awaitable[Any]:
        ...


class Reauthenticator(Protocol):
    """
    Protocol for re-authentication routines.

    Invoked with no arguments. Success or failure is the only thing the
    coordinator looks at; the routine is expected to update whatever
    credentials the transport reads on its next call.
    """

    def __call__(self) -> Awaitable[None]:
        ...


class AuthFailurePredicate(Protocol):
    """
    Protocol for auth-failure classification.

    Must be pure and must not raise.
    """

    def __call__(self, error: BaseException) -> bool:
        ...


__all__ = [
    "ErrorCategory",
    "Transport",
    "Reauthenticator",
    "AuthFailurePredicate",
]
