"""Tests for the 'projects' command group."""

from __future__ import annotations

from typer.testing import CliRunner

from shadfocus_cli.commands.projects import app
from shadfocus_cli.repositories import read_once
from shadfocus_cli.utils import exit_codes

runner = CliRunner()
USER = "local"


def names(gateway):
    return [p.name for p in read_once(gateway.subscribe_projects, USER)]


def test_list_seeds_defaults(cli_gateway):
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    for name in ("Deep Work", "Study", "Creative"):
        assert name in result.stdout


def test_add(cli_gateway):
    result = runner.invoke(app, ["add", "Writing", "--color", "green"])

    assert result.exit_code == 0
    assert "Project created: Writing" in result.stdout
    assert names(cli_gateway)[-1] == "Writing"


def test_add_unknown_color(cli_gateway):
    result = runner.invoke(app, ["add", "Writing", "-c", "orange"])

    assert result.exit_code == exit_codes.ERROR_INVALID_ARGS
    assert "Unknown color" in result.stdout


def test_rename(cli_gateway):
    result = runner.invoke(app, ["rename", "study", "Research"])

    assert result.exit_code == 0
    assert names(cli_gateway) == ["Deep Work", "Research", "Creative"]


def test_recolor(cli_gateway):
    result = runner.invoke(app, ["recolor", "Creative", "red"])

    assert "now red" in result.stdout
    assert read_once(cli_gateway.subscribe_projects, USER)[2].color == "red"


def test_delete_with_yes(cli_gateway):
    result = runner.invoke(app, ["delete", "Study", "--yes"])

    assert "Project deleted: Study" in result.stdout
    assert names(cli_gateway) == ["Deep Work", "Creative"]


def test_delete_declined(cli_gateway):
    result = runner.invoke(app, ["delete", "Study"], input="n\n")

    assert "Cancelled" in result.stdout
    assert "Study" in names(cli_gateway)


def test_delete_last_project(cli_gateway):
    runner.invoke(app, ["delete", "Study", "-y"])
    runner.invoke(app, ["delete", "Creative", "-y"])

    result = runner.invoke(app, ["delete", "Deep Work", "-y"])

    assert result.exit_code == exit_codes.ERROR_CONFLICT
    assert "last project" in result.stdout
    assert names(cli_gateway) == ["Deep Work"]


def test_delete_missing(cli_gateway):
    result = runner.invoke(app, ["delete", "ghost", "-y"])
    assert result.exit_code == exit_codes.ERROR_NOT_FOUND
