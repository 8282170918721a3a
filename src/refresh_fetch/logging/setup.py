"""Logging setup and configuration."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from refresh_fetch.config import FetchConfig, get_config
from refresh_fetch.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_LEVEL = logging.INFO
DEFAULT_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 5

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "aiohttp.access",
    "aiohttp.client",
    "asyncio",
    "urllib3",
]


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    name: str = "refresh_fetch",
    level: int | str = DEFAULT_LEVEL,
    json_format: bool = False,
    log_file: Path | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Configure the root logger with a console handler and optional file handler.

    Args:
        name: Logger name to return
        level: Level for all handlers (int or name such as "DEBUG")
        json_format: Use JSONFormatter on the console instead of ConsoleFormatter
        log_file: Optional path for a size-rotated JSON log file
        max_bytes: Rotation size for the log file
        backup_count: Number of rotated files to keep
        suppress_noisy: Quiet down HTTP client and asyncio loggers

    Returns:
        Configured logger instance
    """
    level = _resolve_level(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger = logging.getLogger(name)
    logger.debug(
        f"Logging initialized: file={log_file}, json={json_format}",
        extra={"operation": "setup_logging"},
    )
    return logger


def setup_logging_from_config(config: FetchConfig | None = None) -> logging.Logger:
    """Configure logging from the ``log_level``/``log_json`` settings."""
    config = config or get_config()
    return setup_logging(level=config.log_level, json_format=config.log_json)


def get_logger(name: str) -> logging.Logger:
    """Get a logger; configure handlers once with setup_logging()."""
    return logging.getLogger(name)
