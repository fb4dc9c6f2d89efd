"""Shared subscription plumbing for gateway adapters."""

from __future__ import annotations

import threading
from abc import abstractmethod
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Any

from shadfocus_cli.models import DEFAULT_PROJECTS, Project, Session, Settings
from shadfocus_cli.repositories import PersistenceGateway, TimerDocument, Unsubscribe
from shadfocus_cli.utils.logger import get_logger

PROJECTS = "projects"
SESSIONS = "sessions"
SETTINGS = "settings"
ACTIVE_TIMER = "active_timer"


class _Subscription:
    __slots__ = ("callback", "active")

    def __init__(self, callback: Callable[[Any], None]):
        self.callback = callback
        self.active = True


class ObservableGateway(PersistenceGateway):
    """Implements the subscribe_* half of the gateway on top of plain loaders.

    Subclasses provide the ``_load_*`` readers, ``_seed_projects`` and the
    write methods, and call :meth:`_notify` after every committed write.
    Callbacks run outside any adapter lock.
    """

    def __init__(self) -> None:
        self._observers: dict[tuple[str, str], list[_Subscription]] = defaultdict(list)
        self._observer_lock = threading.Lock()

    # --- Readers supplied by adapters ---

    @abstractmethod
    def _load_projects(self, user_id: str) -> list[Project]: ...

    @abstractmethod
    def _load_sessions(self, user_id: str) -> list[Session]: ...

    @abstractmethod
    def _load_settings(self, user_id: str) -> Settings | None: ...

    @abstractmethod
    def _load_active_timer(self, user_id: str) -> TimerDocument | None: ...

    @abstractmethod
    def _seed_projects(self, user_id: str, projects: Iterable[Project]) -> None: ...

    # --- Subscriptions ---

    def subscribe_projects(self, user_id, on_change) -> Unsubscribe:
        return self._subscribe(PROJECTS, user_id, on_change)

    def subscribe_sessions(self, user_id, on_change) -> Unsubscribe:
        return self._subscribe(SESSIONS, user_id, on_change)

    def subscribe_settings(self, user_id, on_change) -> Unsubscribe:
        return self._subscribe(SETTINGS, user_id, on_change)

    def subscribe_active_timer(self, user_id, on_change) -> Unsubscribe:
        return self._subscribe(ACTIVE_TIMER, user_id, on_change)

    def _subscribe(
        self, topic: str, user_id: str, callback: Callable[[Any], None]
    ) -> Unsubscribe:
        key = (topic, user_id)
        value = self._snapshot(topic, user_id)
        subscription = _Subscription(callback)
        with self._observer_lock:
            self._observers[key].append(subscription)
        self._observed(topic, user_id)
        callback(value)

        def unsubscribe() -> None:
            subscription.active = False
            with self._observer_lock:
                subscribers = self._observers.get(key, [])
                if subscription in subscribers:
                    subscribers.remove(subscription)
                if not subscribers:
                    self._observers.pop(key, None)

        return unsubscribe

    def _observed(self, topic: str, user_id: str) -> None:
        """Hook called once a subscription is registered."""

    def _observed_keys(self) -> list[tuple[str, str]]:
        with self._observer_lock:
            return list(self._observers)

    def _snapshot(self, topic: str, user_id: str) -> Any:
        if topic == PROJECTS:
            projects = self._load_projects(user_id)
            if not projects:
                get_logger("gateway").info("seeding default projects for %s", user_id)
                self._seed_projects(user_id, DEFAULT_PROJECTS)
                projects = list(DEFAULT_PROJECTS)
            return projects
        if topic == SESSIONS:
            return self._load_sessions(user_id)
        if topic == SETTINGS:
            settings = self._load_settings(user_id)
            if settings is None:
                settings = Settings()
                self.update_settings(user_id, settings)
            return settings
        if topic == ACTIVE_TIMER:
            return self._load_active_timer(user_id)
        raise ValueError(f"Unknown topic: {topic}")

    def _notify(self, topic: str, user_id: str) -> None:
        """Push the current value of ``topic`` to every live subscriber."""
        with self._observer_lock:
            subscribers = list(self._observers.get((topic, user_id), ()))
        if not subscribers:
            return
        value = self._snapshot(topic, user_id)
        for subscription in subscribers:
            if not subscription.active:
                continue
            try:
                subscription.callback(value)
            except Exception:
                get_logger("gateway").exception(
                    "subscriber for %s/%s raised", topic, user_id
                )
