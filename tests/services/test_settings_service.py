"""Tests for SettingsService."""

from shadfocus_cli.models import Settings
from shadfocus_cli.repositories import read_once
from shadfocus_cli.services.settings_service import SettingsService


def test_defaults_created_on_first_read(gateway):
    assert SettingsService(gateway, "user-1").get_settings() == Settings()


def test_set_dark_mode_keeps_duration(gateway):
    gateway.update_settings("user-1", Settings(timer_duration=45))
    service = SettingsService(gateway, "user-1")

    updated = service.set_dark_mode(True)

    assert updated == Settings(timer_duration=45, dark_mode=True)
    assert read_once(gateway.subscribe_settings, "user-1").dark_mode is True


def test_users_have_separate_settings(gateway):
    SettingsService(gateway, "alice").set_dark_mode(True)
    assert SettingsService(gateway, "bob").get_settings().dark_mode is False
