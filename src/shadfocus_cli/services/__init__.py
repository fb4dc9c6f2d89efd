"""Services module for ShadFocus CLI - Business logic layer."""

from .config_service import ConfigService, get_config_service
from .project_service import ProjectService
from .session_service import SessionService, SessionStats
from .settings_service import SettingsService

__all__ = [
    "ConfigService",
    "get_config_service",
    "ProjectService",
    "SessionService",
    "SessionStats",
    "SettingsService",
]
