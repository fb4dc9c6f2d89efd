"""ShadFocus CLI - Pomodoro and stopwatch time tracking."""

__version__ = "0.3.0"
