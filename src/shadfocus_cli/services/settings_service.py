"""Settings service - per-user timer settings."""

from __future__ import annotations

from shadfocus_cli.models import Settings
from shadfocus_cli.repositories import PersistenceGateway, read_once


class SettingsService:
    """Reads and updates the user's settings singleton."""

    def __init__(self, gateway: PersistenceGateway, user_id: str):
        self.gateway = gateway
        self.user_id = user_id

    def get_settings(self) -> Settings:
        """Current settings; defaults are created on first access."""
        return read_once(self.gateway.subscribe_settings, self.user_id)

    def set_dark_mode(self, enabled: bool) -> Settings:
        settings = self.get_settings().model_copy(update={"dark_mode": enabled})
        self.gateway.update_settings(self.user_id, settings)
        return settings


def get_settings_service() -> SettingsService:
    """Settings service for the configured database and user."""
    from shadfocus_cli.services.config_service import get_config_service

    config_service = get_config_service()
    return SettingsService(config_service.get_gateway(), config_service.config.user_id)
