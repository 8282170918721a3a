"""
Async JSON HTTP client (aiohttp).

Request functions here share the ``(url, options)`` call shape, so they can be
wrapped by the re-authentication coordinator directly.
"""

from refresh_fetch.http.client import (
    FetchJSONResponse,
    JSONFetcher,
    create_session,
    fetch_json,
)

__all__ = [
    "FetchJSONResponse",
    "JSONFetcher",
    "create_session",
    "fetch_json",
]
