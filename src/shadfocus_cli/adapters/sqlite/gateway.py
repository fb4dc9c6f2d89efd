"""SQLite-backed persistence gateway.

Writes commit immediately and notify local subscribers. Changes committed by
other processes sharing the database file are picked up by :meth:`poll`,
which compares per-topic revision counters.
"""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from shadfocus_cli.adapters.base import (
    ACTIVE_TIMER,
    PROJECTS,
    SESSIONS,
    SETTINGS,
    ObservableGateway,
)
from shadfocus_cli.adapters.sqlite.connection import open_connection
from shadfocus_cli.exceptions import GatewayError, NotFoundError
from shadfocus_cli.models import ActiveTimer, Project, ProjectColor, Session, Settings
from shadfocus_cli.repositories import TimerDocument
from shadfocus_cli.utils.clock import now_ms
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("sqlite")


def _row_to_session(row: sqlite3.Row) -> Session:
    return Session(
        id=row["id"],
        project_id=row["project_id"],
        project_name=row["project_name"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        duration_seconds=row["duration_seconds"],
        notes=row["notes"],
        tags=tuple(json.loads(row["tags"])),
        color=row["color"],
    )


class SqliteGateway(ObservableGateway):
    """Gateway over a local SQLite database file."""

    def __init__(self, db_path: str | Path):
        super().__init__()
        self.db_path = Path(db_path)
        self._lock = threading.RLock()
        self._seen: dict[tuple[str, str], int] = {}
        try:
            self._conn = open_connection(self.db_path)
        except sqlite3.Error as e:
            raise GatewayError(f"Cannot open database {self.db_path}: {e}") from e
        logger.debug("opened %s", self.db_path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # --- Low-level helpers ---

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                self._conn.rollback()
                logger.error("write to %s failed: %s", self.db_path, e)
                raise GatewayError(f"Storage write failed: {e}") from e
            except Exception:
                self._conn.rollback()
                raise

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise GatewayError(f"Storage read failed: {e}") from e

    def _bump(self, conn: sqlite3.Connection, user_id: str, topic: str) -> None:
        conn.execute(
            """
            INSERT INTO revisions (user_id, topic, revision) VALUES (?, ?, 1)
            ON CONFLICT (user_id, topic) DO UPDATE SET revision = revision + 1
            """,
            (user_id, topic),
        )
        row = conn.execute(
            "SELECT revision FROM revisions WHERE user_id = ? AND topic = ?",
            (user_id, topic),
        ).fetchone()
        self._seen[(topic, user_id)] = row["revision"]

    def _revision(self, topic: str, user_id: str) -> int:
        rows = self._query(
            "SELECT revision FROM revisions WHERE user_id = ? AND topic = ?",
            (user_id, topic),
        )
        return rows[0]["revision"] if rows else 0

    # --- Readers ---

    def _load_projects(self, user_id: str) -> list[Project]:
        rows = self._query(
            "SELECT id, name, color FROM projects WHERE user_id = ? "
            "ORDER BY created_at, rowid",
            (user_id,),
        )
        return [Project(id=r["id"], name=r["name"], color=r["color"]) for r in rows]

    def _load_sessions(self, user_id: str) -> list[Session]:
        rows = self._query(
            "SELECT * FROM sessions WHERE user_id = ? ORDER BY end_time DESC",
            (user_id,),
        )
        return [_row_to_session(row) for row in rows]

    def _load_settings(self, user_id: str) -> Settings | None:
        rows = self._query("SELECT document FROM settings WHERE user_id = ?", (user_id,))
        if not rows:
            return None
        return Settings.model_validate(json.loads(rows[0]["document"]))

    def _load_active_timer(self, user_id: str) -> TimerDocument | None:
        rows = self._query(
            "SELECT document FROM active_timers WHERE user_id = ?", (user_id,)
        )
        if not rows:
            return None
        return json.loads(rows[0]["document"])

    def _seed_projects(self, user_id: str, projects: Iterable[Project]) -> None:
        created_at = now_ms()
        with self._transaction() as conn:
            conn.executemany(
                "INSERT OR IGNORE INTO projects (user_id, id, name, color, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                [(user_id, p.id, p.name, p.color, created_at) for p in projects],
            )
            self._bump(conn, user_id, PROJECTS)

    # --- Cross-process change detection ---

    def _observed(self, topic: str, user_id: str) -> None:
        self._seen.setdefault((topic, user_id), self._revision(topic, user_id))

    def poll(self) -> None:
        for topic, user_id in self._observed_keys():
            revision = self._revision(topic, user_id)
            if revision != self._seen.get((topic, user_id)):
                logger.debug("external change to %s for %s", topic, user_id)
                self._seen[(topic, user_id)] = revision
                self._notify(topic, user_id)

    # --- Sessions ---

    def create_session(self, user_id: str, session: Session) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO sessions (
                    user_id, id, project_id, project_name, start_time, end_time,
                    duration_seconds, notes, tags, color
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    session.id,
                    session.project_id,
                    session.project_name,
                    session.start_time,
                    session.end_time,
                    session.duration_seconds,
                    session.notes,
                    json.dumps(list(session.tags)),
                    session.color,
                ),
            )
            self._bump(conn, user_id, SESSIONS)
        self._notify(SESSIONS, user_id)

    def update_session(self, user_id: str, session: Session) -> None:
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                UPDATE sessions SET project_id = ?, project_name = ?, start_time = ?,
                    end_time = ?, duration_seconds = ?, notes = ?, tags = ?, color = ?
                WHERE user_id = ? AND id = ?
                """,
                (
                    session.project_id,
                    session.project_name,
                    session.start_time,
                    session.end_time,
                    session.duration_seconds,
                    session.notes,
                    json.dumps(list(session.tags)),
                    session.color,
                    user_id,
                    session.id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Session '{session.id}' not found")
            self._bump(conn, user_id, SESSIONS)
        self._notify(SESSIONS, user_id)

    def delete_session(self, user_id: str, session_id: str) -> None:
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM sessions WHERE user_id = ? AND id = ?", (user_id, session_id)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                self._bump(conn, user_id, SESSIONS)
        if deleted:
            self._notify(SESSIONS, user_id)

    # --- Active timer ---

    def _write_timer(self, conn: sqlite3.Connection, user_id: str, document: dict) -> None:
        conn.execute(
            "INSERT INTO active_timers (user_id, document) VALUES (?, ?) "
            "ON CONFLICT (user_id) DO UPDATE SET document = excluded.document",
            (user_id, json.dumps(document)),
        )
        self._bump(conn, user_id, ACTIVE_TIMER)

    def set_active_timer(self, user_id: str, timer: ActiveTimer) -> None:
        with self._transaction() as conn:
            self._write_timer(conn, user_id, timer.to_document())
        self._notify(ACTIVE_TIMER, user_id)

    def patch_active_timer(self, user_id: str, fields: Mapping[str, Any]) -> None:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT document FROM active_timers WHERE user_id = ?", (user_id,)
            ).fetchone()
            if row is None:
                return
            document = json.loads(row["document"])
            for key, value in fields.items():
                if value is None:
                    document.pop(key, None)
                else:
                    document[key] = value
            self._write_timer(conn, user_id, document)
        self._notify(ACTIVE_TIMER, user_id)

    def delete_active_timer(self, user_id: str) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM active_timers WHERE user_id = ?", (user_id,))
            deleted = cursor.rowcount > 0
            if deleted:
                self._bump(conn, user_id, ACTIVE_TIMER)
        if deleted:
            self._notify(ACTIVE_TIMER, user_id)

    # --- Projects & settings ---

    def add_project(self, user_id: str, name: str, color: ProjectColor) -> Project:
        project = Project(id=str(uuid.uuid4()), name=name, color=color)
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO projects (user_id, id, name, color, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (user_id, project.id, project.name, project.color, now_ms()),
            )
            self._bump(conn, user_id, PROJECTS)
        self._notify(PROJECTS, user_id)
        return project

    def update_project(self, user_id, project_id, *, name=None, color=None) -> Project:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT id, name, color FROM projects WHERE user_id = ? AND id = ?",
                (user_id, project_id),
            ).fetchone()
            if row is None:
                raise NotFoundError(f"Project '{project_id}' not found")
            project = Project(
                id=row["id"],
                name=name if name is not None else row["name"],
                color=color if color is not None else row["color"],
            )
            conn.execute(
                "UPDATE projects SET name = ?, color = ? WHERE user_id = ? AND id = ?",
                (project.name, project.color, user_id, project_id),
            )
            self._bump(conn, user_id, PROJECTS)
        self._notify(PROJECTS, user_id)
        return project

    def delete_project(self, user_id: str, project_id: str) -> None:
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM projects WHERE user_id = ? AND id = ?", (user_id, project_id)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                self._bump(conn, user_id, PROJECTS)
        if deleted:
            self._notify(PROJECTS, user_id)

    def update_settings(self, user_id: str, settings: Settings) -> None:
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO settings (user_id, document) VALUES (?, ?) "
                "ON CONFLICT (user_id) DO UPDATE SET document = excluded.document",
                (user_id, json.dumps(settings.to_document())),
            )
            self._bump(conn, user_id, SETTINGS)
        self._notify(SETTINGS, user_id)
