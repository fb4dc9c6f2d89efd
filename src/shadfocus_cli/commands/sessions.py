"""Session history commands."""

from __future__ import annotations

from datetime import datetime

import typer
from rich.table import Table

from shadfocus_cli.exceptions import InvalidInputError
from shadfocus_cli.models.focus.analytics import PERIODS
from shadfocus_cli.services.project_service import ProjectService
from shadfocus_cli.services.session_service import get_session_service
from shadfocus_cli.utils.clock import datetime_to_ms
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console
from shadfocus_cli.utils.ui.formatters import (
    format_duration,
    format_info,
    format_success,
    format_tags,
    format_timestamp,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Session history and analytics")
console = get_console()


def _check_period(period: str) -> str:
    if period not in PERIODS:
        raise InvalidInputError(f"Unknown period '{period}'. Use: {', '.join(PERIODS)}")
    return period


def _parse_time(value: str) -> int:
    try:
        return datetime_to_ms(datetime.fromisoformat(value))
    except ValueError as e:
        raise InvalidInputError(
            f"Invalid time '{value}'. Use ISO format, e.g. 2024-05-01T09:30"
        ) from e


@app.command("list")
@command_wrapper
def list_sessions(
    period: str = typer.Option("all", "--period", help="day, week, month or all"),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Filter by tag"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum rows"),
) -> None:
    """List sessions, newest first."""
    sessions = get_session_service().list_sessions(_check_period(period), tag)
    if not sessions:
        format_info("No sessions found")
        return

    table = Table(title=f"Sessions ({len(sessions)})")
    table.add_column("ID", style="dim")
    table.add_column("Ended")
    table.add_column("Project", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Tags", style="magenta")
    table.add_column("Notes")
    for session in sessions[:limit]:
        table.add_row(
            session.id[:8],
            format_timestamp(session.end_time),
            f"[{session.color}]{session.project_name or 'Unknown Project'}[/]",
            format_duration(session.duration_seconds),
            format_tags(session.tags),
            session.notes,
        )
    console.print(table)


@app.command("stats")
@command_wrapper
def session_stats(
    period: str = typer.Option("week", "--period", help="day, week, month or all"),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Filter by tag"),
) -> None:
    """Focus time totals per day and per project."""
    stats = get_session_service().stats(_check_period(period), tag)

    console.print(
        f"[bold]Total focus time:[/bold] {format_duration(stats.total_seconds)} "
        f"in {len(stats.sessions)} sessions"
    )
    if not stats.sessions:
        return

    daily = Table(title="Per day")
    daily.add_column("Day")
    daily.add_column("Minutes", justify="right")
    for day, minutes in stats.daily:
        daily.add_row(day.strftime("%b %d"), f"{minutes:.2f}")
    console.print(daily)

    projects = Table(title="Per project")
    projects.add_column("Project", style="bold")
    projects.add_column("Minutes", justify="right")
    for name, minutes in stats.projects:
        projects.add_row(name, f"{minutes:.2f}")
    console.print(projects)


@app.command("edit")
@command_wrapper
def edit_session(
    session_id: str = typer.Argument(..., help="Session id or id prefix"),
    notes: str | None = typer.Option(None, "--notes", help="Replace notes"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Replace tags (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
    start: str | None = typer.Option(None, "--start", help="Corrected start time"),
    end: str | None = typer.Option(None, "--end", help="Corrected end time"),
    minutes: float | None = typer.Option(None, "--minutes", help="Corrected duration"),
    project: str | None = typer.Option(None, "--project", "-p", help="Corrected project"),
) -> None:
    """Edit notes and tags, or correct the recorded fields of a session."""
    service = get_session_service()

    new_tags = [] if clear_tags else (tags or None)
    session = service.edit_session(session_id, notes=notes, tags=new_tags)

    if any(value is not None for value in (start, end, minutes, project)):
        session = service.correct_session(
            session.id,
            start_time=_parse_time(start) if start else None,
            end_time=_parse_time(end) if end else None,
            duration_seconds=round(minutes * 60) if minutes is not None else None,
            project=(
                ProjectService(service.gateway, service.user_id).resolve(project)
                if project
                else None
            ),
        )
    format_success(f"Session updated: {session.id[:8]}")


@app.command("delete")
@command_wrapper
def delete_session(
    session_id: str = typer.Argument(..., help="Session id or id prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a session from history."""
    if not yes and not typer.confirm(f"Are you sure you want to delete session {session_id}?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    session = get_session_service().delete_session(session_id)
    format_success(f"Session deleted: {session.id[:8]}")
