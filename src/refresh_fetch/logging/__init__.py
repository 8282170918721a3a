"""
Structured logging module.

Provides JSON and console logging with request/trace context propagation.
"""

from refresh_fetch.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from refresh_fetch.logging.formatters import ConsoleFormatter, JSONFormatter
from refresh_fetch.logging.setup import (
    get_logger,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    # Setup
    "setup_logging",
    "setup_logging_from_config",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
]
