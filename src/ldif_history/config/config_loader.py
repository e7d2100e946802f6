"""
Configuration loader for ldif-history.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import ConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "LDIF_HISTORY_"

# Environment variable -> (dotted key, converter)
_ENV_OVERRIDES = {
    "BACKUP_DIR": ("backup.dir", str),
    "LDIF_CMD": ("backup.ldif_cmd", str),
    "COMMIT_MSG": ("backup.commit_msg", str),
    "COMMIT_DATE": ("backup.commit_date", str),
    "MAX_READ_ATTEMPTS": ("reader.max_attempts", int),
    "RETRY_DELAY": ("reader.retry_delay", float),
    "GIT_USER_NAME": ("git.user_name", str),
    "GIT_USER_EMAIL": ("git.user_email", str),
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class BackupConfig:
    """
    Configuration for a backup run.
    
    Starts from built-in defaults, merges an optional YAML file on top and
    finally applies LDIF_HISTORY_* environment overrides.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration.
        
        Args:
            config_path: Path to YAML config file (optional)
        """
        self.config_path = Path(config_path) if config_path else None
        self.config = self._default_config()
        if self.config_path:
            _merge(self.config, self._load_config())
        self._apply_env_overrides()
        self.validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ConfigError(f"Config file not found: {self.config_path}")
        
        logger.info(f"Loading config from: {self.config_path}")
        
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e
        
        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config file {self.config_path} must contain a mapping")
        return config

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return copy.deepcopy({
            "backup": {
                "dir": None,
                "ldif_cmd": "slapcat",
                "commit_msg": "LDAP backup",
                "commit_date": None,
                "gc": False,
            },
            "reader": {
                "max_attempts": 10,
                "retry_delay": 0.0,
            },
            "ldif": {
                "unique_key": "dn",
                "creation_time": "createTimestamp",
            },
            "git": {
                "executable": "git",
                "user_name": None,
                "user_email": None,
            },
        })

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        for suffix, (key, convert) in _ENV_OVERRIDES.items():
            raw = os.environ.get(ENV_PREFIX + suffix)
            if raw is None or raw.strip() == "":
                continue
            try:
                self.set(key, convert(raw))
            except ValueError as e:
                raise ConfigError(f"Invalid value for {ENV_PREFIX + suffix}: {raw!r}") from e

    def validate(self) -> None:
        """Check value ranges; raises ConfigError."""
        attempts = self.get("reader.max_attempts")
        if not isinstance(attempts, int) or attempts < 2:
            raise ConfigError(f"reader.max_attempts must be an integer >= 2, got {attempts!r}")
        delay = self.get("reader.retry_delay", 0.0)
        if not isinstance(delay, (int, float)) or delay < 0:
            raise ConfigError(f"reader.retry_delay must be a number >= 0, got {delay!r}")
        if not self.get("backup.ldif_cmd"):
            raise ConfigError("backup.ldif_cmd must not be empty")
        if not self.get("ldif.unique_key"):
            raise ConfigError("ldif.unique_key must not be empty")

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dotted key."""
        keys = key.split(".")
        target = self.config
        for k in keys[:-1]:
            target = target.setdefault(k, {})
        target[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key."""
        keys = key.split(".")
        value = self.config
        
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        
        return value if value is not None else default
