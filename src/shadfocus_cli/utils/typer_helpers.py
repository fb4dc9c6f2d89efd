"""Typer helper utilities."""

from difflib import get_close_matches

import click
import typer
from typer.core import TyperGroup

from shadfocus_cli.utils.ui.console import get_console


def closest_commands(group: click.Group, attempted: str, limit: int = 3) -> list[str]:
    """Visible command names that look like ``attempted``, best match first."""
    names = [name for name, cmd in group.commands.items() if not cmd.hidden]
    return get_close_matches(attempted, names, n=limit, cutoff=0.6)


def _report_unknown(ctx: click.Context, attempted: str, suggestions: list[str]) -> None:
    console = get_console()
    console.print(f'[red]Error:[/red] unknown command "{attempted}" for "{ctx.info_name}"')
    console.print()
    heading = "Did you mean this?" if len(suggestions) == 1 else "Did you mean one of these?"
    console.print(f"[yellow]{heading}[/yellow]")
    for suggestion in suggestions:
        console.print(f"        {suggestion}")


class SuggestingGroup(TyperGroup):
    """Group that answers a mistyped subcommand with the nearest names.

    Without a close match the usual click usage error is raised.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            suggestions = closest_commands(self, args[0]) if args else []
            if not suggestions:
                raise
            _report_unknown(ctx, args[0], suggestions)
            raise typer.Exit(1) from e
