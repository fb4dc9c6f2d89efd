"""Database schema for the local ShadFocus store.

Sessions and projects are relational rows; settings and the active timer are
kept as JSON documents so they round-trip exactly as the core writes them.
The ``revisions`` table is bumped on every write and lets other processes
sharing the file detect changes.
"""

from __future__ import annotations

import sqlite3

SCHEMA_VERSION = 1

CREATE_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL
)
"""

CREATE_PROJECTS_TABLE = """
CREATE TABLE IF NOT EXISTS projects (
    user_id TEXT NOT NULL,
    id TEXT NOT NULL,
    name TEXT NOT NULL,
    color TEXT NOT NULL,
    created_at INTEGER NOT NULL,
    PRIMARY KEY (user_id, id)
)
"""

CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS sessions (
    user_id TEXT NOT NULL,
    id TEXT NOT NULL,
    project_id TEXT NOT NULL,
    project_name TEXT NOT NULL,
    start_time INTEGER NOT NULL,
    end_time INTEGER NOT NULL,
    duration_seconds INTEGER NOT NULL,
    notes TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '[]',
    color TEXT NOT NULL,
    PRIMARY KEY (user_id, id)
)
"""

CREATE_SETTINGS_TABLE = """
CREATE TABLE IF NOT EXISTS settings (
    user_id TEXT PRIMARY KEY,
    document TEXT NOT NULL
)
"""

CREATE_ACTIVE_TIMERS_TABLE = """
CREATE TABLE IF NOT EXISTS active_timers (
    user_id TEXT PRIMARY KEY,
    document TEXT NOT NULL
)
"""

CREATE_REVISIONS_TABLE = """
CREATE TABLE IF NOT EXISTS revisions (
    user_id TEXT NOT NULL,
    topic TEXT NOT NULL,
    revision INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (user_id, topic)
)
"""

ALL_TABLES = [
    CREATE_SCHEMA_VERSION_TABLE,
    CREATE_PROJECTS_TABLE,
    CREATE_SESSIONS_TABLE,
    CREATE_SETTINGS_TABLE,
    CREATE_ACTIVE_TIMERS_TABLE,
    CREATE_REVISIONS_TABLE,
]

ALL_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_sessions_end_time ON sessions(user_id, end_time)",
    "CREATE INDEX IF NOT EXISTS idx_projects_created ON projects(user_id, created_at)",
]


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Create all tables and indexes if they do not exist yet."""
    cursor = connection.cursor()

    for create_statement in ALL_TABLES:
        cursor.execute(create_statement)

    for index_statement in ALL_INDEXES:
        cursor.execute(index_statement)

    cursor.execute(
        "INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, datetime('now'))",
        (SCHEMA_VERSION,),
    )

    connection.commit()


def get_schema_version(connection: sqlite3.Connection) -> int:
    """Current schema version, or 0 if the database is not initialized."""
    try:
        cursor = connection.execute("SELECT MAX(version) FROM schema_version")
        result = cursor.fetchone()
        return result[0] if result[0] is not None else 0
    except sqlite3.OperationalError:
        return 0
