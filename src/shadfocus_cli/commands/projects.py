"""Project management commands."""

import typer
from rich.table import Table

from shadfocus_cli.services.project_service import get_project_service
from shadfocus_cli.utils.typer_helpers import SuggestingGroup
from shadfocus_cli.utils.ui.console import get_console
from shadfocus_cli.utils.ui.formatters import format_info, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Project management commands")
console = get_console()


@app.command("list")
@command_wrapper
def list_projects() -> None:
    """List projects."""
    projects = get_project_service().list_projects()

    table = Table(title="Projects")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Color")
    for project in projects:
        table.add_row(project.id, project.name, f"[{project.color}]{project.color}[/]")
    console.print(table)


@app.command("add")
@command_wrapper
def add_project(
    name: str = typer.Argument(..., help="Project name"),
    color: str = typer.Option("blue", "--color", "-c", help="Project color"),
) -> None:
    """Create a new project."""
    project = get_project_service().create_project(name, color)
    format_success(f"Project created: {project.name} ({project.id})")


@app.command("rename")
@command_wrapper
def rename_project(
    project: str = typer.Argument(..., help="Project id or name"),
    name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a project. Past sessions keep the old name."""
    renamed = get_project_service().rename_project(project, name)
    format_success(f"Project renamed: {renamed.name}")


@app.command("recolor")
@command_wrapper
def recolor_project(
    project: str = typer.Argument(..., help="Project id or name"),
    color: str = typer.Argument(..., help="New color"),
) -> None:
    """Change a project's color."""
    recolored = get_project_service().recolor_project(project, color)
    format_success(f"Project {recolored.name} is now {recolored.color}")


@app.command("delete")
@command_wrapper
def delete_project(
    project: str = typer.Argument(..., help="Project id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a project. Its sessions stay in history."""
    if not yes and not typer.confirm(f"Are you sure you want to delete project {project}?"):
        format_info("Cancelled")
        raise typer.Exit(0)

    deleted = get_project_service().delete_project(project)
    format_success(f"Project deleted: {deleted.name}")
