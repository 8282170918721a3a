"""
Single-flight re-authentication coordinator.

Wraps a request function so that auth failures trigger one shared
re-authentication, after which each affected call is retried exactly once.

Usage:
    fetch = configure_refresh_fetch(
        perform_request=fetch_json,
        is_auth_failure=is_auth_error,
        reauthenticate=token_store.refresh,
    )
    result = await fetch("https://api.example.com/items", {"method": "GET"})

Concurrency:
    All calls run on one event loop. The check for a pending
    re-authentication and the installation of a new one happen with no await
    in between, so N calls failing at once produce exactly one
    ``reauthenticate()`` invocation.
"""

import asyncio
import logging
from typing import Any

from refresh_fetch.types import AuthFailurePredicate, Reauthenticator, Transport

logger = logging.getLogger(__name__)


class RefreshCoordinator:
    """
    Request wrapper with single-flight re-authentication.

    Calling the coordinator has the same signature as the wrapped
    ``perform_request``; arguments are forwarded unchanged to every attempt.

    Outcome rules:
        - Success passes through untouched.
        - Failures the predicate rejects are raised as-is, no refresh.
        - Auth failures trigger (or join) the pending re-authentication and
          retry once. If the re-authentication fails, the original failure
          is raised.
        - A call that arrives while a re-authentication is pending waits for
          it, then issues its request regardless of how the refresh ended.

    The coordinator adds no timeouts. If ``perform_request`` or
    ``reauthenticate`` never completes, neither does the call waiting on it.

    Args:
        perform_request: Request function to wrap
        is_auth_failure: Pure predicate deciding whether an error warrants
            re-authentication. Must not raise.
        reauthenticate: Zero-argument coroutine function that refreshes the
            credentials ``perform_request`` uses
        name: Label used in log records
    """

    def __init__(
        self,
        perform_request: Transport,
        is_auth_failure: AuthFailurePredicate,
        reauthenticate: Reauthenticator,
        name: str = "refresh_fetch",
    ):
        self._perform_request = perform_request
        self._is_auth_failure = is_auth_failure
        self._reauthenticate = reauthenticate
        self.name = name
        self._pending: asyncio.Task[None] | None = None

    @property
    def is_refreshing(self) -> bool:
        """True while a re-authentication is in flight."""
        return self._pending is not None

    async def __call__(self, url: Any, *args: Any, **kwargs: Any) -> Any:
        pending = self._pending
        if pending is not None:
            await self._join(pending, url)
            return await self._perform_request(url, *args, **kwargs)

        result, error = await self._attempt(url, args, kwargs)
        if error is None:
            return result

        if not self._is_auth_failure(error):
            raise error

        # No await between this check and the install below
        pending = self._pending
        if pending is None:
            pending = self._start_reauthentication(url)

        try:
            await asyncio.shield(pending)
        except Exception:
            # Refresh failure is reported by _on_reauth_done; the caller
            # gets its own request's error
            raise error from None

        return await self._perform_request(url, *args, **kwargs)

    async def _attempt(
        self, url: Any, args: tuple, kwargs: dict
    ) -> tuple[Any, Exception | None]:
        """Run the wrapped request once. Returns (result, None) or (None, error)."""
        try:
            return await self._perform_request(url, *args, **kwargs), None
        except Exception as e:
            return None, e

    async def _join(self, pending: asyncio.Task[None], url: Any) -> None:
        """Wait for another call's re-authentication; its failure is not ours."""
        logger.debug(
            "Waiting for pending re-authentication",
            extra={"operation": self.name, "http_url": str(url)},
        )
        try:
            await asyncio.shield(pending)
        except Exception as e:
            logger.debug(
                "Pending re-authentication failed, issuing request anyway",
                extra={
                    "operation": self.name,
                    "http_url": str(url),
                    "error_type": type(e).__name__,
                },
            )

    def _start_reauthentication(self, url: Any) -> asyncio.Task[None]:
        logger.info(
            "Auth failure, starting re-authentication",
            extra={"operation": self.name, "http_url": str(url)},
        )
        task = asyncio.ensure_future(self._run_reauthentication())
        task.add_done_callback(self._on_reauth_done)
        self._pending = task
        return task

    async def _run_reauthentication(self) -> None:
        try:
            await self._reauthenticate()
        finally:
            # Cleared before any waiter resumes
            self._pending = None

    def _on_reauth_done(self, task: asyncio.Task[None]) -> None:
        # A task cancelled before its first step never runs the finally above
        if self._pending is task:
            self._pending = None

        if task.cancelled():
            logger.warning(
                "Re-authentication cancelled", extra={"operation": self.name}
            )
            return

        error = task.exception()
        if error is None:
            logger.info("Re-authentication succeeded", extra={"operation": self.name})
        else:
            logger.warning(
                "Re-authentication failed: %s",
                str(error)[:200],
                extra={
                    "operation": self.name,
                    "error_type": type(error).__name__,
                    "error_message": str(error)[:200],
                },
            )


def configure_refresh_fetch(
    perform_request: Transport,
    is_auth_failure: AuthFailurePredicate,
    reauthenticate: Reauthenticator,
    name: str = "refresh_fetch",
) -> RefreshCoordinator:
    """
    Wrap ``perform_request`` with single-flight re-authentication.

    Returns:
        Callable with the same signature as ``perform_request``
    """
    return RefreshCoordinator(
        perform_request=perform_request,
        is_auth_failure=is_auth_failure,
        reauthenticate=reauthenticate,
        name=name,
    )


__all__ = [
    "RefreshCoordinator",
    "configure_refresh_fetch",
]
