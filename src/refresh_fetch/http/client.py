"""
JSON HTTP client using aiohttp.

Provides a request function with the ``(url, options)`` shape expected by
the coordinator:

- Sets ``Content-Type: application/json`` for requests with a body
- Parses JSON responses based on the response Content-Type
- Raises ResponseError for non-2xx responses

Usage:
    async with create_session() as session:
        fetch = configure_refresh_fetch(
            perform_request=JSONFetcher(session),
            is_auth_failure=is_auth_error,
            reauthenticate=refresh_tokens,
        )
        result = await fetch("https://api.example.com/me")
        print(result.body)
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any

import aiohttp

from refresh_fetch.config import FetchConfig, get_config
from refresh_fetch.errors.exceptions import JSONParseError, ResponseError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


@dataclass
class FetchJSONResponse:
    """Response with its decoded body."""

    response: aiohttp.ClientResponse
    body: Any


def _build_request_kwargs(options: dict[str, Any] | None) -> dict[str, Any]:
    """
    Translate a fetch-style options mapping into ClientSession.request kwargs.

    ``method``, ``headers`` and ``body`` are recognized; any other key is
    passed through as a keyword argument.
    """
    kwargs = dict(options or {})
    kwargs.pop("method", None)
    headers = dict(kwargs.pop("headers", None) or {})
    body = kwargs.pop("body", None)

    if body is not None:
        # Caller-supplied headers win over the default
        has_content_type = any(k.lower() == "content-type" for k in headers)
        if not has_content_type:
            headers = {"Content-Type": JSON_CONTENT_TYPE, **headers}
        if not isinstance(body, (str, bytes, bytearray)):
            body = json.dumps(body)
        kwargs["data"] = body

    if headers:
        kwargs["headers"] = headers
    return kwargs


def _parse_json(text: str) -> Any:
    if text == "":
        return None
    try:
        return json.loads(text)
    except ValueError as e:
        raise JSONParseError(text, cause=e) from e


async def _read_body(response: aiohttp.ClientResponse) -> Any:
    """Decode the body as JSON when the Content-Type says so, else as text."""
    content_type = response.headers.get("Content-Type") or ""
    text = await response.text()
    if "json" in content_type.lower():
        return _parse_json(text)
    return text


async def fetch_json(
    url: str,
    options: dict[str, Any] | None = None,
    *,
    session: aiohttp.ClientSession | None = None,
) -> FetchJSONResponse:
    """
    Issue an HTTP request and decode the response body.

    Args:
        url: URL to request
        options: ``{"method": ..., "headers": ..., "body": ...}`` plus any
            extra ClientSession.request keyword arguments
        session: aiohttp ClientSession (caller manages lifecycle). When
            omitted, a short-lived session is created for this request.

    Returns:
        FetchJSONResponse with the response and decoded body

    Raises:
        ResponseError: Response status is not 2xx
        JSONParseError: JSON Content-Type with an unparseable body
        aiohttp.ClientError: Transport-level failure
    """
    if session is None:
        async with create_session() as owned_session:
            return await fetch_json(url, options, session=owned_session)

    method = str((options or {}).get("method") or "GET").upper()
    request_kwargs = _build_request_kwargs(options)

    start = time.perf_counter()
    async with session.request(method, url, **request_kwargs) as response:
        body = await _read_body(response)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.debug(
        "%s %s -> %s",
        method,
        url,
        response.status,
        extra={
            "http_method": method,
            "http_url": str(url),
            "http_status": response.status,
            "duration_ms": round(duration_ms, 2),
        },
    )

    if not 200 <= response.status < 300:
        raise ResponseError(response.status, response, body)

    return FetchJSONResponse(response=response, body=body)


class JSONFetcher:
    """
    ``fetch_json`` bound to a session.

    Instances are request functions with the ``(url, options)`` signature,
    ready to hand to ``configure_refresh_fetch``.
    """

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def __call__(
        self, url: str, options: dict[str, Any] | None = None
    ) -> FetchJSONResponse:
        return await fetch_json(url, options, session=self.session)


def create_session(config: FetchConfig | None = None) -> aiohttp.ClientSession:
    """
    Create aiohttp ClientSession with connection pooling and timeouts.

    Args:
        config: Settings to use (default: the process-wide config)

    Returns:
        Configured aiohttp.ClientSession

    Note:
        Caller is responsible for session lifecycle management.
        Use async context manager for automatic cleanup:

        async with create_session() as session:
            result = await fetch_json(url, session=session)
    """
    config = config or get_config()

    connector = aiohttp.TCPConnector(
        limit=config.max_connections,
        limit_per_host=config.max_connections_per_host,
        ssl=config.enable_ssl,
        ttl_dns_cache=300,
    )

    timeout = aiohttp.ClientTimeout(
        total=config.timeout_total,
        connect=config.timeout_connect,
        sock_read=config.timeout_sock_read,
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers=config.default_headers or None,
    )


__all__ = [
    "FetchJSONResponse",
    "JSONFetcher",
    "fetch_json",
    "create_session",
]
