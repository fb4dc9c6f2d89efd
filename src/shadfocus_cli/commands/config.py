"""Configuration management commands."""

import typer
from rich.table import Table

from shadfocus_cli.services.config_service import get_config_service
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console
from shadfocus_cli.utils.ui.formatters import format_info, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Configuration management commands")
console = get_console()


@app.command("show")
@command_wrapper
def show_config() -> None:
    """Show the current configuration."""
    config_service = get_config_service()

    table = Table(title=str(config_service.config_path))
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in config_service.config.model_dump().items():
        table.add_row(key, "" if value is None else str(value))
    table.add_row("[dim]database file[/dim]", f"[dim]{config_service.database_path}[/dim]")
    console.print(table)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., tick_seconds)"),
) -> None:
    """Get a configuration value."""
    console.print(get_config_service().get(key))


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., tick_seconds)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    config = get_config_service().set(key, value)
    format_success(f"Configuration '{key}' set to '{getattr(config, key)}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Reset all configuration to defaults?"):
        format_info("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
