"""Focus timer core: time arithmetic, state machine, sessions and display."""

from .arithmetic import TimerReading, elapsed_seconds, measure, remaining_seconds, used_seconds
from .materializer import SessionMaterializer
from .projector import DisplayProjector, Ticker, TimerDisplay
from .state import TimerStateMachine
from .ui import TimerScreen, ring_bell, show_completion_message, show_finished_message

__all__ = [
    "TimerReading",
    "elapsed_seconds",
    "measure",
    "remaining_seconds",
    "used_seconds",
    "SessionMaterializer",
    "DisplayProjector",
    "Ticker",
    "TimerDisplay",
    "TimerStateMachine",
    "TimerScreen",
    "ring_bell",
    "show_completion_message",
    "show_finished_message",
]
