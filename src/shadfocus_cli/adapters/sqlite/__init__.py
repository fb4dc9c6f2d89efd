"""SQLite adapter for local storage."""

from shadfocus_cli.adapters.sqlite.gateway import SqliteGateway

__all__ = ["SqliteGateway"]
