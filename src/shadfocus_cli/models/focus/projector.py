"""Display projection for the active timer.

:class:`DisplayProjector` turns a timer snapshot into the numbers a UI shows.
It keeps no state of its own, so it can be rebuilt from any freshly loaded
snapshot. :class:`Ticker` supplies the once-per-second cadence.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

from shadfocus_cli.models import ActiveTimer, Settings, TimerMode
from shadfocus_cli.models.focus.arithmetic import measure
from shadfocus_cli.utils.logger import get_logger
from shadfocus_cli.utils.ui.formatters import format_clock

logger = get_logger("projector")


@dataclass(frozen=True)
class TimerDisplay:
    """What the UI shows for one instant."""

    mode: TimerMode
    seconds: int  # remaining (pomodoro) or elapsed (stopwatch)
    total_seconds: int | None
    is_running: bool
    has_timer: bool
    project_name: str = ""

    @property
    def progress(self) -> float:
        """Completed fraction of a pomodoro in [0, 1]; always 0 for a stopwatch."""
        if not self.total_seconds:
            return 0.0
        done = (self.total_seconds - self.seconds) / self.total_seconds
        return min(1.0, max(0.0, done))

    @property
    def label(self) -> str:
        if not self.has_timer:
            return "Ready"
        if not self.is_running:
            return "Paused"
        return "Focusing" if self.mode == "pomodoro" else "Counting Up"

    @property
    def clock_text(self) -> str:
        return format_clock(self.seconds)

    def title(self) -> str:
        """Status line such as ``"12:34 - Deep Work"``."""
        if not self.has_timer:
            return "ShadFocus"
        if self.project_name:
            return f"{self.clock_text} - {self.project_name}"
        return self.clock_text


class DisplayProjector:
    """Computes :class:`TimerDisplay` values from a timer snapshot."""

    def project(
        self,
        timer: ActiveTimer | None,
        settings: Settings,
        *,
        mode: TimerMode,
        now: int,
    ) -> TimerDisplay:
        if timer is not None:
            reading = measure(timer, now, settings.duration_seconds)
            if reading is not None:
                return TimerDisplay(
                    mode=timer.mode,
                    seconds=max(0, reading.seconds),
                    total_seconds=reading.total,
                    is_running=timer.is_active,
                    has_timer=True,
                    project_name=timer.project_name,
                )

        if mode == "pomodoro":
            return TimerDisplay(
                mode=mode,
                seconds=settings.duration_seconds,
                total_seconds=settings.duration_seconds,
                is_running=False,
                has_timer=False,
            )
        return TimerDisplay(
            mode=mode, seconds=0, total_seconds=None, is_running=False, has_timer=False
        )


class Ticker:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread."""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop,), name="shadfocus-ticker", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop ticking. Safe to call from inside the callback."""
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval + 1)

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("tick callback failed")
