"""SQLite connection setup for the local ShadFocus store."""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from shadfocus_cli.adapters.sqlite.schema import initialize_schema


def open_connection(db_path: str | Path) -> sqlite3.Connection:
    """Open (creating if needed) a configured connection to ``db_path``.

    The connection uses WAL mode so several processes can share the file,
    allows use from the timer's background threads, and has the schema
    applied before it is returned.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    is_new_database = not db_path.exists()

    connection = sqlite3.connect(
        str(db_path),
        check_same_thread=False,  # ticker and debounce threads write too
        timeout=30.0,
    )
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL")

    # Owner read/write only
    if is_new_database:
        os.chmod(db_path, 0o600)

    initialize_schema(connection)
    return connection
