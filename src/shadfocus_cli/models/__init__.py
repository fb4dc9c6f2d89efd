"""Data models for ShadFocus CLI."""

from .config_models import AppConfig
from .project import DEFAULT_PROJECTS, PROJECT_COLORS, Project, ProjectColor
from .session import Session, normalize_tags
from .settings import (
    DEFAULT_DURATION_MINUTES,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    Settings,
    clamp_duration,
)
from .timer import (
    TIMER_MODES,
    ActiveTimer,
    Paused,
    PomodoroTimer,
    Running,
    StopwatchTimer,
    TimerMode,
    timer_from_document,
)

__all__ = [
    "AppConfig",
    "DEFAULT_PROJECTS",
    "PROJECT_COLORS",
    "Project",
    "ProjectColor",
    "Session",
    "normalize_tags",
    "DEFAULT_DURATION_MINUTES",
    "MAX_DURATION_MINUTES",
    "MIN_DURATION_MINUTES",
    "Settings",
    "clamp_duration",
    "TIMER_MODES",
    "ActiveTimer",
    "Paused",
    "PomodoroTimer",
    "Running",
    "StopwatchTimer",
    "TimerMode",
    "timer_from_document",
]
