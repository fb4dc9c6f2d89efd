"""Persistence gateway abstraction for ShadFocus CLI.

The gateway is the port between the timer core and whatever document store
backs it (Ports & Adapters). Every call is scoped by an explicit user id.
Reads are push based: a subscription delivers the current value right away
and again after every change, until the returned unsubscribe callable is
invoked. Writes return nothing the core depends on; failures surface as
:class:`~shadfocus_cli.exceptions.GatewayError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from shadfocus_cli.models import ActiveTimer, Project, ProjectColor, Session, Settings

T = TypeVar("T")

Unsubscribe = Callable[[], None]
TimerDocument = dict[str, Any]


class PersistenceGateway(ABC):
    """Durable per-user storage for projects, sessions, settings and the active timer."""

    # --- Subscriptions ---

    @abstractmethod
    def subscribe_projects(
        self, user_id: str, on_change: Callable[[list[Project]], None]
    ) -> Unsubscribe:
        """Observe the user's projects.

        Default projects are seeded when the user has none.
        """
        raise NotImplementedError

    @abstractmethod
    def subscribe_sessions(
        self, user_id: str, on_change: Callable[[list[Session]], None]
    ) -> Unsubscribe:
        """Observe the user's sessions, ordered by ``end_time`` descending."""
        raise NotImplementedError

    @abstractmethod
    def subscribe_settings(
        self, user_id: str, on_change: Callable[[Settings], None]
    ) -> Unsubscribe:
        """Observe the user's settings, creating the defaults if absent."""
        raise NotImplementedError

    @abstractmethod
    def subscribe_active_timer(
        self, user_id: str, on_change: Callable[[TimerDocument | None], None]
    ) -> Unsubscribe:
        """Observe the raw active-timer document; ``None`` when there is none.

        The raw document is delivered so the core decides what an unusable
        timer means.
        """
        raise NotImplementedError

    # --- Sessions ---

    @abstractmethod
    def create_session(self, user_id: str, session: Session) -> None:
        """Store a new session under its own id."""
        raise NotImplementedError

    @abstractmethod
    def update_session(self, user_id: str, session: Session) -> None:
        """Overwrite an existing session.

        Raises:
            NotFoundError: If the session does not exist
        """
        raise NotImplementedError

    @abstractmethod
    def delete_session(self, user_id: str, session_id: str) -> None:
        """Delete a session; deleting a missing session is a no-op."""
        raise NotImplementedError

    # --- Active timer ---

    @abstractmethod
    def set_active_timer(self, user_id: str, timer: ActiveTimer) -> None:
        """Create or replace the user's active timer document."""
        raise NotImplementedError

    @abstractmethod
    def patch_active_timer(self, user_id: str, fields: Mapping[str, Any]) -> None:
        """Merge document fields into the active timer.

        A ``None`` value removes that field. Patching when no timer exists
        is a no-op.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_active_timer(self, user_id: str) -> None:
        """Delete the active timer, if any."""
        raise NotImplementedError

    # --- Projects & settings ---

    @abstractmethod
    def add_project(self, user_id: str, name: str, color: ProjectColor) -> Project:
        """Create a project with a generated id."""
        raise NotImplementedError

    @abstractmethod
    def update_project(
        self,
        user_id: str,
        project_id: str,
        *,
        name: str | None = None,
        color: ProjectColor | None = None,
    ) -> Project:
        """Rename and/or recolor a project.

        Raises:
            NotFoundError: If the project does not exist
        """
        raise NotImplementedError

    @abstractmethod
    def delete_project(self, user_id: str, project_id: str) -> None:
        """Delete a project. Sessions are never touched."""
        raise NotImplementedError

    @abstractmethod
    def update_settings(self, user_id: str, settings: Settings) -> None:
        """Replace the user's settings."""
        raise NotImplementedError

    def poll(self) -> None:
        """Deliver changes made outside this process to local subscribers.

        Adapters whose store notifies in-process only (or pushes on its own)
        need not override this.
        """


def read_once(
    subscribe: Callable[[str, Callable[[T], None]], Unsubscribe], user_id: str
) -> T:
    """Take a single snapshot through a subscription and release it.

    Example:
        projects = read_once(gateway.subscribe_projects, user_id)
    """
    received: list[T] = []
    unsubscribe = subscribe(user_id, received.append)
    try:
        if not received:
            raise RuntimeError("subscription did not deliver an initial value")
        return received[-1]
    finally:
        unsubscribe()
