"""Turns a finished active timer into a persisted session."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Sequence

from shadfocus_cli.exceptions import GatewayError
from shadfocus_cli.models import DEFAULT_PROJECTS, ActiveTimer, Project, Session
from shadfocus_cli.models.focus.arithmetic import used_seconds
from shadfocus_cli.models.project import ProjectColor
from shadfocus_cli.models.settings import DEFAULT_DURATION_MINUTES
from shadfocus_cli.repositories import PersistenceGateway
from shadfocus_cli.utils.clock import now_ms
from shadfocus_cli.utils.logger import get_logger

logger = get_logger("materializer")


def _new_session_id() -> str:
    return str(uuid.uuid4())


def resolve_color(project_id: str, projects: Sequence[Project]) -> ProjectColor:
    """Color of ``project_id``; the first project's if it was deleted meanwhile."""
    for project in projects:
        if project.id == project_id:
            return project.color
    if projects:
        return projects[0].color
    return DEFAULT_PROJECTS[0].color


class SessionMaterializer:
    """Writes a Session for a timer, then removes the timer.

    The session write always happens first. If it fails the timer is left in
    place so no work is lost and the caller may retry.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] = _new_session_id,
    ):
        self.gateway = gateway
        self.clock = clock or now_ms
        self.id_factory = id_factory

    def build(
        self,
        timer: ActiveTimer,
        explicit_duration: int | None = None,
        *,
        projects: Sequence[Project] = (),
        fallback_duration: int | None = None,
    ) -> Session:
        """Create the Session record for ``timer`` without writing it."""
        now = self.clock()
        if fallback_duration is None:
            fallback_duration = DEFAULT_DURATION_MINUTES * 60
        if explicit_duration is not None:
            duration = explicit_duration
        else:
            duration = used_seconds(timer, now, fallback_duration) or 0

        return Session(
            id=self.id_factory(),
            project_id=timer.project_id,
            project_name=timer.project_name,
            start_time=timer.start_time,
            end_time=max(now, timer.start_time),
            duration_seconds=max(0, duration),
            notes=timer.notes,
            tags=timer.tags,
            color=resolve_color(timer.project_id, projects),
        )

    def materialize(
        self,
        user_id: str,
        timer: ActiveTimer,
        explicit_duration: int | None = None,
        *,
        projects: Sequence[Project] = (),
        fallback_duration: int | None = None,
    ) -> Session:
        """Persist a session for ``timer`` and delete the active timer.

        Raises:
            GatewayError: If the session could not be written; the timer is kept
        """
        session = self.build(
            timer,
            explicit_duration,
            projects=projects,
            fallback_duration=fallback_duration,
        )
        self.gateway.create_session(user_id, session)
        logger.info(
            "saved session %s (%ss, project=%s)",
            session.id,
            session.duration_seconds,
            session.project_name or "-",
        )

        try:
            self.gateway.delete_active_timer(user_id)
        except GatewayError as e:
            logger.warning("session saved but active timer not deleted: %s", e)
        return session
