"""Main entry point for ShadFocus CLI."""

import typer

from shadfocus_cli import __version__
from shadfocus_cli.commands import config, projects, sessions, settings, timer
from shadfocus_cli.services.config_service import get_config_service
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console

app = typer.Typer(
    name="shadfocus",
    cls=SuggestingGroup,
    help="Pomodoro and stopwatch focus timer with project tracking",
    no_args_is_help=True,
)

console = get_console()


app.add_typer(timer.app, name="timer", help="Pomodoro and stopwatch timer")
app.add_typer(projects.app, name="projects", help="Project management commands")
app.add_typer(sessions.app, name="sessions", help="Session history and analytics")
app.add_typer(settings.app, name="settings", help="Timer settings")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]ShadFocus CLI[/bold] version [cyan]{__version__}[/cyan]")
    config_service = get_config_service()
    console.print(f"[dim]Database: {config_service.database_path}[/dim]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
