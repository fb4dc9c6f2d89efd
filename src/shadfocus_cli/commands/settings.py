"""Per-user timer settings commands."""

import typer

from shadfocus_cli.services.settings_service import get_settings_service
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console
from shadfocus_cli.utils.ui.formatters import format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Timer settings")
console = get_console()


@app.command("show")
@command_wrapper
def show_settings() -> None:
    """Show the current settings."""
    settings = get_settings_service().get_settings()
    console.print(f"[bold]Pomodoro duration:[/bold] {settings.timer_duration} minutes")
    console.print(f"[bold]Dark mode:[/bold] {'on' if settings.dark_mode else 'off'}")


@app.command("dark-mode")
@command_wrapper
def set_dark_mode(
    enabled: bool = typer.Option(True, "--on/--off", help="Turn dark mode on or off"),
) -> None:
    """Turn dark mode on or off."""
    settings = get_settings_service().set_dark_mode(enabled)
    format_success(f"Dark mode {'on' if settings.dark_mode else 'off'}")
