"""
refresh_fetch: request wrapper with single-flight re-authentication.

Wraps an async request function so that authentication failures trigger one
shared re-authentication, after which every affected call is retried once.

Modules:
    coordinator - Single-flight re-authentication wrapper (RefreshCoordinator)
    http        - aiohttp JSON request function and session factory
    errors      - Exception hierarchy and auth-failure classification
    config      - YAML-backed client configuration
    logging     - Structured JSON/console logging with context propagation
"""

from .coordinator import RefreshCoordinator, configure_refresh_fetch
from .errors import ResponseError, auth_failure_predicate, is_auth_error
from .http import FetchJSONResponse, JSONFetcher, create_session, fetch_json
from .types import AuthFailurePredicate, ErrorCategory, Reauthenticator, Transport

__version__ = "0.1.0"

__all__ = [
    "RefreshCoordinator",
    "configure_refresh_fetch",
    "fetch_json",
    "JSONFetcher",
    "FetchJSONResponse",
    "create_session",
    "ResponseError",
    "is_auth_error",
    "auth_failure_predicate",
    "ErrorCategory",
    "Transport",
    "Reauthenticator",
    "AuthFailurePredicate",
]
