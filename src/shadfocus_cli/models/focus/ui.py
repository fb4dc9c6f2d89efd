"""Rich rendering of the timer for the terminal."""

from __future__ import annotations

import threading

from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from shadfocus_cli.models import ActiveTimer, Session
from shadfocus_cli.models.focus.projector import TimerDisplay
from shadfocus_cli.models.focus.state import TimerStateMachine
from shadfocus_cli.utils.logger import get_logger
from shadfocus_cli.utils.ui.console import TIMER_COLORS, get_console
from shadfocus_cli.utils.ui.formatters import format_duration, format_tags

logger = get_logger("ui")

_BAR_WIDTH = 40


def _color_for(display: TimerDisplay) -> str:
    if not display.has_timer:
        state = "idle"
    elif not display.is_running:
        state = "paused"
    elif display.mode == "pomodoro" and display.seconds < 60:
        state = "ending"
    else:
        state = display.mode
    return TIMER_COLORS[state]


class TimerScreen:
    """Draws a :class:`TimerDisplay` and keeps it live while a timer runs."""

    def __init__(self, console: Console | None = None):
        self.console = console or get_console()

    def render(self, display: TimerDisplay, timer: ActiveTimer | None = None) -> Panel:
        color = _color_for(display)
        components = [
            Text(display.clock_text, style=f"bold {color}", justify="center"),
            Text(""),
        ]

        if display.total_seconds:
            percent = int(display.progress * 100)
            filled = int(_BAR_WIDTH * display.progress)
            bar = "▓" * filled + "░" * (_BAR_WIDTH - filled)
            components.append(Text(f"{bar}  {percent}%", style="dim", justify="center"))

        if display.project_name:
            components.append(Text(display.project_name, style="bold", justify="center"))

        if timer is not None:
            if timer.notes:
                components.append(Text(timer.notes, style="italic", justify="center"))
            if timer.tags:
                components.append(
                    Text(format_tags(timer.tags), style="magenta", justify="center")
                )

        return Panel(
            Align.center(Group(*components), vertical="middle"),
            title=f"[bold {color}]{display.label}[/bold {color}]",
            subtitle=display.mode,
            border_style=color,
            padding=(1, 2),
        )

    def run(self, machine: TimerStateMachine, until: threading.Event) -> bool:
        """Show the live timer until ``until`` is set or the timer goes away.

        Returns:
            False if the user interrupted with Ctrl+C
        """
        with Live(
            self.render(machine.display(), machine.timer),
            console=self.console,
            refresh_per_second=4,
        ) as live:

            def on_display(display: TimerDisplay) -> None:
                live.update(self.render(display, machine.timer))
                if not display.has_timer:
                    until.set()

            unsubscribe = machine.watch(on_display)
            try:
                while not until.wait(0.25):
                    pass
            except KeyboardInterrupt:
                logger.debug("watch interrupted")
                return False
            finally:
                unsubscribe()
        return True


def ring_bell(console: Console | None = None) -> None:
    """Audible completion cue."""
    (console or get_console()).bell()


def show_completion_message(session: Session, console: Console | None = None) -> None:
    """Show a panel after a pomodoro completed on its own."""
    console = console or get_console()
    panel = Panel(
        f"""[bold green]Focus session complete![/bold green]

Project: {session.project_name or "N/A"}
Duration: {format_duration(session.duration_seconds)}

Session saved to history.""",
        border_style="green",
        padding=(1, 2),
    )
    console.print(panel)


def show_finished_message(session: Session | None, console: Console | None = None) -> None:
    """Show the outcome of finishing a timer early."""
    console = console or get_console()
    if session is None:
        body = "[yellow]Timer discarded[/yellow]\n\nOne second or less was used, nothing was saved."
        style = "yellow"
    else:
        body = f"""[bold green]Session saved[/bold green]

Project: {session.project_name or "N/A"}
Time focused: {format_duration(session.duration_seconds)}"""
        style = "green"
    console.print(Panel(body, border_style=style, padding=(1, 2)))
