"""HTTP client configuration from YAML file.

Loads the ``refresh_fetch:`` section of a YAML file:

    refresh_fetch:
      timeout_total: 30
      timeout_connect: 10
      max_connections: 100
      auth_status_codes: [401]
      default_headers:
        User-Agent: my-service/1.0
      log_level: INFO

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files.
"""

import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REFRESH_FETCH_CONFIG"
DEFAULT_CONFIG_FILE = Path("config.yaml")
CONFIG_SECTION = "refresh_fetch"


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _to_bool(value: Any) -> bool:
    # bool('false') would be True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class FetchConfig:
    """HTTP client configuration.

    Timeouts are in seconds.
    """

    # Timeouts
    timeout_total: float = 30.0
    timeout_connect: float = 10.0
    timeout_sock_read: float = 30.0

    # Connection pool
    max_connections: int = 100
    max_connections_per_host: int = 10
    enable_ssl: bool = True

    # Statuses that mean "credentials expired"
    auth_status_codes: List[int] = field(default_factory=lambda: [401])
    default_headers: Dict[str, str] = field(default_factory=dict)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.timeout_total = float(self.timeout_total)
        self.timeout_connect = float(self.timeout_connect)
        self.timeout_sock_read = float(self.timeout_sock_read)
        self.max_connections = int(self.max_connections)
        self.max_connections_per_host = int(self.max_connections_per_host)
        self.enable_ssl = _to_bool(self.enable_ssl)
        self.log_json = _to_bool(self.log_json)
        self.log_level = str(self.log_level).upper()
        self.auth_status_codes = [int(code) for code in self.auth_status_codes]
        self.default_headers = {str(k): str(v) for k, v in self.default_headers.items()}

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        for name in ("timeout_total", "timeout_connect", "timeout_sock_read"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

        if self.max_connections < 1:
            raise ValueError(f"max_connections must be >= 1, got {self.max_connections}")
        if self.max_connections_per_host < 1:
            raise ValueError(
                f"max_connections_per_host must be >= 1, got {self.max_connections_per_host}"
            )
        if self.max_connections_per_host > self.max_connections:
            raise ValueError(
                "max_connections_per_host cannot exceed max_connections "
                f"({self.max_connections_per_host} > {self.max_connections})"
            )

        for code in self.auth_status_codes:
            if not 100 <= code <= 599:
                raise ValueError(f"auth_status_codes contains invalid HTTP status: {code}")

        if self.log_level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log_level: {self.log_level}")


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> FetchConfig:
    """Load configuration from YAML file.

    Path resolution: ``config_path`` argument, then the REFRESH_FETCH_CONFIG
    environment variable, then ./config.yaml. A missing file yields defaults.
    """
    if config_path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_FILE

    config_path = Path(config_path)
    if config_path.exists():
        logger.info(f"Loading configuration from file: {config_path}")
    else:
        logger.debug(f"No configuration file at {config_path}, using defaults")

    yaml_data = _expand_env_vars(load_yaml(config_path))
    section = yaml_data.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ValueError(
            f"Invalid config file: '{CONFIG_SECTION}:' section must be a mapping"
        )

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = {**section, **overrides}

    known = {f.name for f in fields(FetchConfig)}
    unknown = set(section) - known
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

    config = FetchConfig(**{k: v for k, v in section.items() if k in known})
    config.validate()
    return config


_fetch_config: Optional[FetchConfig] = None


def get_config() -> FetchConfig:
    """Get or load the singleton config instance."""
    global _fetch_config
    if _fetch_config is None:
        _fetch_config = load_config()
    return _fetch_config


def set_config(config: FetchConfig) -> None:
    """Set the singleton config instance (useful for testing)."""
    global _fetch_config
    _fetch_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _fetch_config
    _fetch_config = None


__all__ = [
    "FetchConfig",
    "load_config",
    "load_yaml",
    "get_config",
    "set_config",
    "reset_config",
]
