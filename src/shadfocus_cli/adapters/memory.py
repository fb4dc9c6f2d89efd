"""In-memory gateway adapter.

Keeps every user's documents in process memory and notifies subscribers
synchronously after each write. Used by tests and as a reference adapter.
"""

from __future__ import annotations

import copy
import threading
import uuid
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from shadfocus_cli.adapters.base import (
    ACTIVE_TIMER,
    PROJECTS,
    SESSIONS,
    SETTINGS,
    ObservableGateway,
)
from shadfocus_cli.exceptions import NotFoundError
from shadfocus_cli.models import ActiveTimer, Project, ProjectColor, Session, Settings
from shadfocus_cli.repositories import TimerDocument


class InMemoryGateway(ObservableGateway):
    """Process-local document store."""

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.RLock()
        self._projects: dict[str, dict[str, Project]] = defaultdict(dict)
        self._sessions: dict[str, dict[str, Session]] = defaultdict(dict)
        self._settings: dict[str, Settings] = {}
        self._timers: dict[str, TimerDocument] = {}

    # --- Readers ---

    def _load_projects(self, user_id: str) -> list[Project]:
        with self._lock:
            return list(self._projects[user_id].values())

    def _load_sessions(self, user_id: str) -> list[Session]:
        with self._lock:
            sessions = list(self._sessions[user_id].values())
        return sorted(sessions, key=lambda s: s.end_time, reverse=True)

    def _load_settings(self, user_id: str) -> Settings | None:
        with self._lock:
            return self._settings.get(user_id)

    def _load_active_timer(self, user_id: str) -> TimerDocument | None:
        with self._lock:
            document = self._timers.get(user_id)
            return copy.deepcopy(document) if document is not None else None

    def _seed_projects(self, user_id: str, projects: Iterable[Project]) -> None:
        with self._lock:
            for project in projects:
                self._projects[user_id].setdefault(project.id, project)

    # --- Sessions ---

    def create_session(self, user_id: str, session: Session) -> None:
        with self._lock:
            self._sessions[user_id][session.id] = session
        self._notify(SESSIONS, user_id)

    def update_session(self, user_id: str, session: Session) -> None:
        with self._lock:
            if session.id not in self._sessions[user_id]:
                raise NotFoundError(f"Session '{session.id}' not found")
            self._sessions[user_id][session.id] = session
        self._notify(SESSIONS, user_id)

    def delete_session(self, user_id: str, session_id: str) -> None:
        with self._lock:
            removed = self._sessions[user_id].pop(session_id, None)
        if removed is not None:
            self._notify(SESSIONS, user_id)

    # --- Active timer ---

    def set_active_timer(self, user_id: str, timer: ActiveTimer) -> None:
        with self._lock:
            self._timers[user_id] = timer.to_document()
        self._notify(ACTIVE_TIMER, user_id)

    def patch_active_timer(self, user_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            document = self._timers.get(user_id)
            if document is None:
                return
            for key, value in fields.items():
                if value is None:
                    document.pop(key, None)
                else:
                    document[key] = copy.deepcopy(value)
        self._notify(ACTIVE_TIMER, user_id)

    def delete_active_timer(self, user_id: str) -> None:
        with self._lock:
            removed = self._timers.pop(user_id, None)
        if removed is not None:
            self._notify(ACTIVE_TIMER, user_id)

    # --- Projects & settings ---

    def add_project(self, user_id: str, name: str, color: ProjectColor) -> Project:
        project = Project(id=str(uuid.uuid4()), name=name, color=color)
        with self._lock:
            self._projects[user_id][project.id] = project
        self._notify(PROJECTS, user_id)
        return project

    def update_project(self, user_id, project_id, *, name=None, color=None) -> Project:
        with self._lock:
            current = self._projects[user_id].get(project_id)
            if current is None:
                raise NotFoundError(f"Project '{project_id}' not found")
            updates = {k: v for k, v in (("name", name), ("color", color)) if v is not None}
            project = Project.model_validate({**current.model_dump(), **updates})
            self._projects[user_id][project_id] = project
        self._notify(PROJECTS, user_id)
        return project

    def delete_project(self, user_id: str, project_id: str) -> None:
        with self._lock:
            removed = self._projects[user_id].pop(project_id, None)
        if removed is not None:
            self._notify(PROJECTS, user_id)

    def update_settings(self, user_id: str, settings: Settings) -> None:
        with self._lock:
            self._settings[user_id] = settings
        self._notify(SETTINGS, user_id)
