"""Shared Rich console and the colours used for timer states."""

from functools import lru_cache

from rich.console import Console

TIMER_COLORS = {
    "idle": "white",
    "paused": "yellow",
    "ending": "red",
    "pomodoro": "cyan",
    "stopwatch": "green",
}


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    return Console(highlight=highlight)
