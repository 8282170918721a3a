"""
Single-flight re-authentication for request functions.

Provides:
- RefreshCoordinator: request wrapper that coalesces concurrent auth
  failures onto one re-authentication and retries each call once
- configure_refresh_fetch: factory returning the wrapped request function
"""

from refresh_fetch.coordinator.single_flight import (
    RefreshCoordinator,
    configure_refresh_fetch,
)

__all__ = [
    "RefreshCoordinator",
    "configure_refresh_fetch",
]
