"""Timer commands: start, pause, resume, finish and watch the active timer."""

from __future__ import annotations

import threading

import typer

from shadfocus_cli.exceptions import InvalidInputError
from shadfocus_cli.models import Session, TimerMode
from shadfocus_cli.models.focus import (
    TimerScreen,
    TimerStateMachine,
    ring_bell,
    show_completion_message,
    show_finished_message,
)
from shadfocus_cli.services.config_service import get_config_service
from shadfocus_cli.services.project_service import ProjectService
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console
from shadfocus_cli.utils.ui.formatters import (
    format_clock,
    format_info,
    format_success,
    format_warning,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Pomodoro and stopwatch timer")
console = get_console()


def _open_machine(live: bool = False, **kwargs) -> TimerStateMachine:
    """State machine for the configured user.

    One-shot commands write edits straight away and drive ticks themselves;
    ``live`` uses the configured debounce and tick cadence.
    """
    config_service = get_config_service()
    config = config_service.config
    return TimerStateMachine(
        config_service.get_gateway(),
        config.user_id,
        mode=config.default_mode,
        debounce_seconds=config.debounce_seconds if live else 0,
        tick_seconds=config.tick_seconds if live else None,
        **kwargs,
    )


def _check_mode(mode: str) -> TimerMode:
    if mode not in ("pomodoro", "stopwatch"):
        raise InvalidInputError(f"Unknown mode '{mode}'. Use pomodoro or stopwatch.")
    return mode  # type: ignore[return-value]


def _settle(machine: TimerStateMachine) -> Session | None:
    """Complete a pomodoro that ran out while nothing was watching it."""
    session = machine.auto_complete()
    if session is not None:
        show_completion_message(session, console)
    return session


def _print_status(machine: TimerStateMachine) -> None:
    console.print(TimerScreen(console).render(machine.display(), machine.timer))


@app.command("start")
@command_wrapper
def start_timer(
    mode: str | None = typer.Option(None, "--mode", "-m", help="pomodoro or stopwatch"),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project id or name (defaults to the first)"
    ),
    note: str = typer.Option("", "--note", "-n", help="Notes for this session"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)"),
) -> None:
    """Start a new timer."""
    with _open_machine() as machine:
        _settle(machine)
        selected = None
        if project:
            selected = ProjectService(machine.gateway, machine.user_id).resolve(project)
        timer = machine.start(
            _check_mode(mode) if mode else None, selected, notes=note, tags=tags
        )
        format_success(
            f"Started {timer.mode} timer"
            + (f" for {timer.project_name}" if timer.project_name else "")
        )
        _print_status(machine)


@app.command("pause")
@command_wrapper
def pause_timer() -> None:
    """Pause the running timer."""
    with _open_machine() as machine:
        if _settle(machine):
            return
        if machine.pause() is None:
            format_warning("No running timer to pause")
            return
        format_success(f"Paused at {machine.display().clock_text}")


@app.command("resume")
@command_wrapper
def resume_timer() -> None:
    """Resume the paused timer."""
    with _open_machine() as machine:
        if machine.resume() is None:
            format_warning("No paused timer to resume")
            return
        format_success(f"Resumed at {machine.display().clock_text}")


@app.command("finish")
@command_wrapper
def finish_timer() -> None:
    """Finish the timer now and save the time spent as a session."""
    with _open_machine() as machine:
        if _settle(machine):
            return
        if machine.timer is None:
            format_warning("No active timer")
            return
        show_finished_message(machine.finish_early(), console)


@app.command("stop")
@command_wrapper
def stop_timer(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Discard the timer without saving a session."""
    with _open_machine() as machine:
        if machine.timer is None:
            format_warning("No active timer")
            return
        if not yes and not typer.confirm("Discard the current timer without saving?"):
            format_info("Cancelled")
            raise typer.Exit(0)
        machine.stop()
        format_success("Timer discarded")


@app.command("status")
@command_wrapper
def timer_status() -> None:
    """Show the active timer."""
    with _open_machine() as machine:
        _settle(machine)
        _print_status(machine)


@app.command("watch")
@command_wrapper
def watch_timer() -> None:
    """Show a live timer, completing the pomodoro when it runs out."""
    config = get_config_service().config
    done = threading.Event()
    completed: list[Session] = []

    def on_complete(session: Session) -> None:
        completed.append(session)
        if config.sound:
            ring_bell(console)
        done.set()

    with _open_machine(live=True, on_complete=on_complete) as machine:
        _settle(machine)
        if machine.timer is None:
            _print_status(machine)
            format_info("No active timer. Start one with 'shadfocus timer start'.")
            return
        finished = TimerScreen(console).run(machine, done)

    if completed:
        show_completion_message(completed[0], console)
    elif not finished:
        format_info("Stopped watching; the timer keeps running.")


@app.command(
    "duration", context_settings={"ignore_unknown_options": True}
)
@command_wrapper
def change_duration(
    delta: int = typer.Argument(..., help="Minutes to add, e.g. +5 or -5"),
) -> None:
    """Adjust the pomodoro duration, including a timer already in progress."""
    with _open_machine() as machine:
        settings = machine.change_duration(delta)
        format_success(f"Pomodoro duration is now {settings.timer_duration} minutes")
        if machine.timer is not None and machine.timer.mode == "pomodoro":
            format_info(f"Remaining: {format_clock(machine.display().seconds)}")


@app.command("note")
@command_wrapper
def set_note(
    text: str = typer.Argument(..., help="Notes for the running timer"),
) -> None:
    """Replace the notes of the active timer."""
    with _open_machine() as machine:
        if machine.update_metadata(notes=text) is None:
            format_warning("No active timer")
            return
    format_success("Notes updated")


@app.command("tag")
@command_wrapper
def set_tags(
    tags: list[str] = typer.Argument(None, help="Tags for the running timer"),
    clear: bool = typer.Option(False, "--clear", help="Remove all tags"),
) -> None:
    """Replace the tags of the active timer."""
    if not tags and not clear:
        raise InvalidInputError("Give at least one tag, or --clear")
    with _open_machine() as machine:
        timer = machine.update_metadata(tags=[] if clear else tags)
        if timer is None:
            format_warning("No active timer")
            return
    format_success(f"Tags: {', '.join(timer.tags) or '(none)'}")


@app.command("mode")
@command_wrapper
def switch_mode(
    mode: str = typer.Argument(..., help="pomodoro or stopwatch"),
) -> None:
    """Switch timer mode. A timer in the other mode is discarded."""
    mode = _check_mode(mode)
    with _open_machine() as machine:
        discarding = machine.timer is not None and machine.timer.mode != mode
        machine.switch_mode(mode)
    get_config_service().set("default_mode", mode)
    if discarding:
        format_warning("The previous timer was discarded")
    format_success(f"Mode set to {mode}")
