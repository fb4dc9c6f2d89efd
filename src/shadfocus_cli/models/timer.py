"""Active timer models.

The stored document is a flat record (``mode``, ``isActive``, ``startTime``,
``pausedAt``, ``pausedDuration``, ``initialDuration``, ...). In memory the
timer is a tagged union keyed by ``mode`` whose pause state is a second
tagged union keyed by ``status``, so a stopwatch never carries an
``initialDuration`` and ``pausedAt`` only exists while paused.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from shadfocus_cli.utils.logger import get_logger

TimerMode = Literal["pomodoro", "stopwatch"]

TIMER_MODES: tuple[str, ...] = ("pomodoro", "stopwatch")


def is_valid_timestamp(value: Any) -> bool:
    """Whether ``value`` is usable as an epoch-millisecond timestamp."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


class Running(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["running"] = "running"


class Paused(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["paused"] = "paused"
    paused_at: int  # epoch ms of the most recent pause


PauseState = Annotated[Running | Paused, Field(discriminator="status")]


class _TimerBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_time: int = Field(gt=0)  # epoch ms, never mutated after creation
    paused_duration: float = Field(default=0.0, ge=0)  # seconds
    pause: PauseState = Field(default_factory=Running)
    project_id: str = ""
    project_name: str = ""
    notes: str = ""
    tags: tuple[str, ...] = ()

    @property
    def is_active(self) -> bool:
        return isinstance(self.pause, Running)

    @property
    def paused_at(self) -> int | None:
        if isinstance(self.pause, Paused):
            return self.pause.paused_at
        return None

    def to_document(self) -> dict[str, Any]:
        """Flatten into the stored document shape."""
        document: dict[str, Any] = {
            "mode": self.mode,
            "isActive": self.is_active,
            "startTime": self.start_time,
            "pausedDuration": self.paused_duration,
            "projectId": self.project_id,
            "projectName": self.project_name,
            "notes": self.notes,
            "tags": list(self.tags),
        }
        if self.paused_at is not None:
            document["pausedAt"] = self.paused_at
        return document


class PomodoroTimer(_TimerBase):
    """Fixed-duration countdown.

    ``initial_duration`` snapshots the duration setting at start, in seconds.
    It is only ``None`` for documents written without it, in which case the
    current setting is used as a fallback.
    """

    mode: Literal["pomodoro"] = "pomodoro"
    initial_duration: int | None = Field(default=None, ge=0)

    def to_document(self) -> dict[str, Any]:
        document = super().to_document()
        if self.initial_duration is not None:
            document["initialDuration"] = self.initial_duration
        return document


class StopwatchTimer(_TimerBase):
    """Open-ended count-up timer."""

    mode: Literal["stopwatch"] = "stopwatch"


ActiveTimer = PomodoroTimer | StopwatchTimer

_timer_adapter: TypeAdapter[ActiveTimer] = TypeAdapter(
    Annotated[ActiveTimer, Field(discriminator="mode")]
)


def timer_from_document(document: Mapping[str, Any] | None) -> ActiveTimer | None:
    """Parse a stored active-timer document.

    Returns ``None`` when the document is absent or unusable (missing or
    invalid ``startTime``, unknown mode). Callers treat that exactly like
    "no active timer".
    """
    if not document:
        return None

    logger = get_logger("timer")
    start_time = document.get("startTime")
    if not is_valid_timestamp(start_time):
        logger.warning("ignoring active timer with invalid startTime: %r", start_time)
        return None

    paused_at = document.get("pausedAt")
    is_active = document.get("isActive", True)
    if not is_active and is_valid_timestamp(paused_at):
        pause: dict[str, Any] = {"status": "paused", "paused_at": int(paused_at)}
    else:
        if not is_active:
            logger.warning("paused timer without pausedAt, treating it as running")
        pause = {"status": "running"}

    data: dict[str, Any] = {
        "mode": document.get("mode"),
        "start_time": int(start_time),
        "paused_duration": document.get("pausedDuration") or 0.0,
        "pause": pause,
        "project_id": document.get("projectId") or "",
        "project_name": document.get("projectName") or "",
        "notes": document.get("notes") or "",
        "tags": tuple(document.get("tags") or ()),
    }
    if document.get("mode") == "pomodoro":
        data["initial_duration"] = document.get("initialDuration")

    try:
        return _timer_adapter.validate_python(data)
    except ValidationError as e:
        logger.warning("ignoring unusable active timer document: %s", e)
        return None
