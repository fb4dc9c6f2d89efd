"""Session service - history queries, analytics and user edits."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from shadfocus_cli.exceptions import InvalidInputError, NotFoundError
from shadfocus_cli.models import Project, Session, normalize_tags
from shadfocus_cli.models.focus.analytics import (
    DailyMinutes,
    Period,
    ProjectMinutes,
    daily_minutes,
    filter_sessions,
    project_breakdown,
    total_seconds,
)
from shadfocus_cli.repositories import PersistenceGateway, read_once
from shadfocus_cli.utils.clock import now_ms
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("sessions")


@dataclass(frozen=True)
class SessionStats:
    sessions: list[Session]
    total_seconds: int
    daily: list[DailyMinutes]
    projects: list[ProjectMinutes]


class SessionService:
    """Service for session history.

    Sessions are only ever created by finishing a timer. Afterwards the user
    may edit notes and tags, correct the recorded fields, or delete them.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        user_id: str,
        clock: Callable[[], int] | None = None,
    ):
        self.gateway = gateway
        self.user_id = user_id
        self.clock = clock or now_ms

    def all_sessions(self) -> list[Session]:
        return read_once(self.gateway.subscribe_sessions, self.user_id)

    def list_sessions(self, period: Period = "all", tag: str | None = None) -> list[Session]:
        """Sessions in ``period`` matching ``tag``, newest first."""
        return filter_sessions(self.all_sessions(), period, tag, now=self.clock())

    def get_session(self, session_id: str) -> Session:
        """Find a session by id or unique id prefix.

        Raises:
            NotFoundError: If no single session matches
        """
        sessions = self.all_sessions()
        for session in sessions:
            if session.id == session_id:
                return session
        matches = [s for s in sessions if s.id.startswith(session_id)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise InvalidInputError(f"Session id '{session_id}' is ambiguous")
        raise NotFoundError(f"Session '{session_id}' not found")

    def stats(self, period: Period = "week", tag: str | None = None) -> SessionStats:
        sessions = self.list_sessions(period, tag)
        return SessionStats(
            sessions=sessions,
            total_seconds=total_seconds(sessions),
            daily=daily_minutes(sessions),
            projects=project_breakdown(sessions),
        )

    def edit_session(
        self,
        session_id: str,
        *,
        notes: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> Session:
        """Replace the notes and/or tags of a session."""
        session = self.get_session(session_id)
        updates: dict[str, Any] = {}
        if notes is not None:
            updates["notes"] = notes
        if tags is not None:
            updates["tags"] = normalize_tags(tags)
        if not updates:
            return session
        edited = session.model_copy(update=updates)
        self.gateway.update_session(self.user_id, edited)
        logger.info("edited session %s (%s)", edited.id, ", ".join(updates))
        return edited

    def correct_session(
        self,
        session_id: str,
        *,
        start_time: int | None = None,
        end_time: int | None = None,
        duration_seconds: int | None = None,
        project: Project | None = None,
    ) -> Session:
        """Correct recorded fields of a session.

        The result is validated as a whole, so the end can never precede the
        start and the duration can never be negative.

        Raises:
            InvalidInputError: If the corrected session is invalid
        """
        session = self.get_session(session_id)
        data = session.model_dump()
        if start_time is not None:
            data["start_time"] = start_time
        if end_time is not None:
            data["end_time"] = end_time
        if duration_seconds is not None:
            data["duration_seconds"] = duration_seconds
        if project is not None:
            data["project_id"] = project.id
            data["project_name"] = project.name
            data["color"] = project.color

        try:
            corrected = Session.model_validate(data)
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            raise InvalidInputError(f"Invalid session correction: {message}") from e

        self.gateway.update_session(self.user_id, corrected)
        logger.info("corrected session %s", corrected.id)
        return corrected

    def delete_session(self, session_id: str) -> Session:
        session = self.get_session(session_id)
        self.gateway.delete_session(self.user_id, session.id)
        logger.info("deleted session %s", session.id)
        return session


def get_session_service() -> SessionService:
    """Session service for the configured database and user."""
    from shadfocus_cli.services.config_service import get_config_service

    config_service = get_config_service()
    return SessionService(config_service.get_gateway(), config_service.config.user_id)
