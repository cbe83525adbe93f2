"""Configuration for the Home Assistant MCP Bridge"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Iterable

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "ha_mcp_bridge.log"
ENV_FILES = ('.env', '.env.local')


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid"""


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_env_files(directories: Optional[Iterable[Path]] = None) -> Dict[str, str]:
    """
    Load .env and .env.local into os.environ without overriding existing values

    Args:
        directories: Directories to search (defaults to the working directory)

    Returns:
        The values that were read from the files
    """
    config: Dict[str, str] = {}
    for directory in directories or (Path.cwd(),):
        for filename in ENV_FILES:
            path = Path(directory) / filename
            if path.exists():
                config.update({k: v for k, v in dotenv_values(path).items() if v is not None})

    for key, value in config.items():
        os.environ.setdefault(key, value)
    return config


@dataclass(frozen=True)
class BridgeConfig:
    """Immutable runtime configuration, built once at startup"""
    url: str
    token: str
    verify_ssl: bool = True
    timeout: Optional[float] = None
    registry_websocket: bool = False
    log_file: str = DEFAULT_LOG_FILE
    debug: bool = False

    def __post_init__(self):
        if not self.url:
            raise ConfigError("Home Assistant URL is required (--url or HA_URL)")
        if not self.token:
            raise ConfigError("Home Assistant access token is required (--token or HA_TOKEN)")
        # frozen dataclass, so normalise through object.__setattr__
        object.__setattr__(self, 'url', self.url.rstrip('/'))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> 'BridgeConfig':
        """
        Build configuration from environment variables

        Keyword overrides that are not None win over the environment.
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get('HA_TIMEOUT')
        try:
            timeout = float(timeout_raw) if timeout_raw else None
        except ValueError:
            raise ConfigError(f"Invalid HA_TIMEOUT value: {timeout_raw!r}")

        values: Dict[str, Any] = {
            'url': env.get('HA_URL', ''),
            'token': env.get('HA_TOKEN', ''),
            'verify_ssl': _env_flag(env.get('HA_VERIFY_SSL'), True),
            'timeout': timeout,
            'registry_websocket': _env_flag(env.get('HA_REGISTRY_WEBSOCKET'), False),
            'log_file': env.get('MCP_LOG_FILE') or DEFAULT_LOG_FILE,
            'debug': _env_flag(env.get('DEBUG'), False),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def redacted(self) -> Dict[str, Any]:
        """Configuration values that are safe to log"""
        return {
            "url": self.url,
            "token": "****" if self.token else None,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
            "registry_websocket": self.registry_websocket,
            "log_file": self.log_file,
            "debug": self.debug,
        }
