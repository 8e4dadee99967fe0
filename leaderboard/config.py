"""
Configuration management for the leaderboard service.
Supports an optional JSON file, a local .env file and environment variable overrides.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when required settings are missing or invalid."""


def parse_flag(value: str) -> bool:
    """
    Parse an on/off environment value.

    @param value: Raw string such as "true", "0" or "off"
    @return: Parsed boolean
    @raise ValueError: If the string is not a recognised flag
    """
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes", "on"):
        return True
    if lowered in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


class LeaderboardConfig:
    """Configuration management for the leaderboard service."""

    DATABASE_URL_ENV = "DATABASE_URL"

    # variable -> (section, key, converter)
    ENV_OVERRIDES = {
        "HOST": ("server", "host", str),
        "PORT": ("server", "port", int),
        "DB_NAME": ("store", "database", str),
        "COLLECTION_NAME": ("store", "collection", str),
        "TOP_N": ("leaderboard", "top_n", int),
        "CORS_ENABLED": ("cors", "enabled", parse_flag),
        "LOG_LEVEL": ("logging", "level", str),
    }

    DEFAULT_CONFIG = {
        "server": {
            "host": "0.0.0.0",
            "port": 2000,
        },
        "store": {
            "database": "example",
            "collection": "leaderboard",
        },
        "leaderboard": {
            "top_n": 10,
        },
        "cors": {
            "enabled": True,
        },
        "logging": {
            "level": "INFO",
        },
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        env_file: Optional[str] = ".env",
    ) -> None:
        """Initialize configuration from file, environment variables, or defaults."""
        if env_file:
            # Variables already set in the process environment win
            load_dotenv(env_file, override=False)

        self.config_path = Path(config_path) if config_path else None
        self.config = self._load_config()
        self._apply_env_overrides()
        self._validate_config()

        url = os.getenv(self.DATABASE_URL_ENV)
        if not url:
            raise ConfigError(
                f"{self.DATABASE_URL_ENV} is not set; "
                "export it or add it to a local .env file"
            )
        self._database_url = url

    @property
    def database_url(self) -> str:
        return self._database_url

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from the JSON file merged over the defaults.

        @return: Dictionary containing the loaded configuration
        """
        config = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path is None or not self.config_path.exists():
            return config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(
                f"Error loading config from {self.config_path}: {e}"
            ) from e

        if not isinstance(loaded_config, dict):
            raise ConfigError(f"{self.config_path} must contain a JSON object")

        self._deep_merge(config, loaded_config)
        logger.debug("Loaded configuration file %s", self.config_path)
        return config

    def _deep_merge(
        self,
        base_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
    ) -> None:
        """
        Merge a loaded file into the defaults, section by section.

        @param base_dict: Configuration being built, updated in place
        @param update_dict: Values read from the JSON file
        """
        for key, value in update_dict.items():
            current = base_dict.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                self._deep_merge(current, value)
                continue
            base_dict[key] = value

    def _apply_env_overrides(self) -> None:
        """
        Apply environment variable overrides to configuration.

        Each variable has a fixed target type; a value that does not
        convert raises ConfigError.
        """
        for env_var, (section, key, convert) in self.ENV_OVERRIDES.items():
            raw = os.getenv(env_var)
            if raw is None:
                continue
            try:
                self.config.setdefault(section, {})[key] = convert(raw)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {env_var}: {raw!r}") from e

    def _validate_config(self) -> None:
        """
        Validate configuration values.

        Unlike display settings, a bad port or limit cannot be silently
        replaced, so invalid values raise ConfigError.
        """
        port = self.get("server", "port")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError(f"Invalid server port: {port!r}")

        top_n = self.get("leaderboard", "top_n")
        if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n <= 0:
            raise ConfigError(f"Invalid leaderboard top_n: {top_n!r}")

        for key in ("database", "collection"):
            value = self.get("store", key)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"Invalid store {key}: {value!r}")

    def get(
        self,
        *keys: str,
    ) -> Any:
        """
        Get nested configuration value.

        @param keys: Variable arguments representing nested keys to traverse
        @return: Configuration value at the specified path, None if not found
        """
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return None
        return value
