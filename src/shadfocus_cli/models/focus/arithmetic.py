"""Time arithmetic for active timers.

Everything here is a pure function of timestamps. A timer never stores a
countdown value: elapsed and remaining time are always recomputed from
``start_time``, ``paused_at`` and ``paused_duration`` so any process can pick
up a timer from a fresh snapshot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from shadfocus_cli.models.timer import (
    ActiveTimer,
    PomodoroTimer,
    TimerMode,
    is_valid_timestamp,
)


def elapsed_seconds(
    now: int,
    start_time: int | float | None,
    *,
    paused_at: int | None = None,
    paused_duration: float | None = None,
    is_active: bool = True,
) -> float | None:
    """Seconds of running time since ``start_time``.

    While paused the value is frozen at ``paused_at`` (or ``now`` if the pause
    timestamp is missing). Returns ``None`` when ``start_time`` is not a
    usable timestamp.
    """
    if not is_valid_timestamp(start_time):
        return None
    paused = paused_duration or 0.0
    if is_active:
        end = now
    else:
        end = paused_at if paused_at is not None else now
    return (end - start_time) / 1000 - paused


def remaining_seconds(elapsed: float, initial_duration: int) -> int:
    """Whole seconds left of a pomodoro, never below zero."""
    return math.floor(max(0.0, initial_duration - elapsed))


def stopwatch_seconds(elapsed: float) -> int:
    return math.floor(elapsed)


@dataclass(frozen=True)
class TimerReading:
    """A timer measured at one instant.

    Attributes:
        mode: Timer mode
        elapsed: Running seconds, fractional
        seconds: What the clock shows: remaining (pomodoro) or elapsed (stopwatch)
        total: Pomodoro target in seconds; ``None`` for stopwatch
    """

    mode: TimerMode
    elapsed: float
    seconds: int
    total: int | None

    @property
    def finished(self) -> bool:
        return self.total is not None and self.seconds == 0


def initial_duration_of(timer: ActiveTimer, fallback_duration: int) -> int | None:
    """The pomodoro target of ``timer``, or ``None`` for a stopwatch."""
    if isinstance(timer, PomodoroTimer):
        if timer.initial_duration is None:
            return fallback_duration
        return timer.initial_duration
    return None


def measure(timer: ActiveTimer, now: int, fallback_duration: int) -> TimerReading | None:
    """Read ``timer`` at ``now``.

    Args:
        timer: The active timer
        now: Current time in epoch ms
        fallback_duration: Seconds used when a pomodoro lacks ``initial_duration``

    Returns:
        The reading, or None if the timer carries no valid start time
    """
    elapsed = elapsed_seconds(
        now,
        timer.start_time,
        paused_at=timer.paused_at,
        paused_duration=timer.paused_duration,
        is_active=timer.is_active,
    )
    if elapsed is None:
        return None

    total = initial_duration_of(timer, fallback_duration)
    if total is not None:
        seconds = remaining_seconds(elapsed, total)
    else:
        seconds = stopwatch_seconds(elapsed)
    return TimerReading(mode=timer.mode, elapsed=elapsed, seconds=seconds, total=total)


def used_seconds(timer: ActiveTimer, now: int, fallback_duration: int) -> int | None:
    """Seconds of work a timer represents if it were finished at ``now``.

    Pomodoro: target minus remaining. Stopwatch: floored elapsed.
    """
    reading = measure(timer, now, fallback_duration)
    if reading is None:
        return None
    if reading.total is not None:
        return reading.total - reading.seconds
    return reading.seconds
