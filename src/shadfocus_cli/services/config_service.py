"""Configuration service for managing ShadFocus CLI configuration.

ConfigService is the single source of truth for configuration. It handles:

- Loading and saving config.json
- Reading and changing single keys with validation
- Building the persistence gateway the configuration points at
"""

from __future__ import annotations

import atexit
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError

from shadfocus_cli.adapters.sqlite import SqliteGateway
from shadfocus_cli.exceptions import InvalidInputError
from shadfocus_cli.models.config_models import AppConfig
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("config")


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""

        self.config_dir = Path(user_config_dir("shadfocus_cli"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("shadfocus_cli"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._gateway: SqliteGateway | None = None
        self._atexit_registered = False

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def database_path(self) -> Path:
        if self.config.database_path:
            return Path(self.config.database_path).expanduser()
        return self.data_dir / "shadfocus.db"

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        logger.info("configuration reset to defaults")

    def get(self, key: str) -> Any:
        """Value of a single configuration key.

        Raises:
            InvalidInputError: If the key does not exist
        """
        if key not in AppConfig.model_fields:
            raise InvalidInputError(f"Unknown config key: {key}")
        return getattr(self.config, key)

    def set(self, key: str, value: Any) -> AppConfig:
        """Change a single key, validating the whole configuration.

        String values are coerced to the field's type ("true", "0.25", ...).
        An empty string or "none" clears an optional value.

        Raises:
            InvalidInputError: If the key is unknown or the value invalid
        """
        if key not in AppConfig.model_fields:
            raise InvalidInputError(f"Unknown config key: {key}")
        if isinstance(value, str) and value.strip().lower() in ("", "none", "null"):
            value = None

        data = self.config.model_dump()
        data[key] = value
        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            raise InvalidInputError(f"Invalid value for {key}: {message}") from e

        self.save_config()
        logger.info("config %s set to %r", key, value)
        return self._config

    def get_gateway(self) -> SqliteGateway:
        """Gateway for the configured database, opened once and reused.

        A changed ``database_path`` closes the old gateway and opens the new
        one. The open gateway is closed at interpreter exit.
        """
        db_path = self.database_path
        if self._gateway is not None and self._gateway.db_path == db_path:
            return self._gateway

        self.close_gateway()
        self._gateway = SqliteGateway(db_path)
        if not self._atexit_registered:
            atexit.register(self.close_gateway)
            self._atexit_registered = True
        logger.debug("opened gateway at %s", db_path)
        return self._gateway

    def close_gateway(self) -> None:
        """Close the cached gateway, if one is open."""
        if self._gateway is None:
            return
        try:
            self._gateway.close()
        finally:
            self._gateway = None


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

