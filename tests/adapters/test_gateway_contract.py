"""Behaviour every gateway adapter must share.

Each test runs against the in-memory adapter and against SQLite in a
temporary directory.
"""

from __future__ import annotations

import pytest

from shadfocus_cli.adapters import InMemoryGateway, SqliteGateway
from shadfocus_cli.exceptions import NotFoundError
from shadfocus_cli.models import DEFAULT_PROJECTS, PomodoroTimer, Session, Settings
from shadfocus_cli.repositories import read_once

USER = "user-1"
T0 = 1_700_000_000_000


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryGateway()
    else:
        gateway = SqliteGateway(tmp_path / "shadfocus.db")
        yield gateway
        gateway.close()


def make_session(sid: str, end: int, **kwargs) -> Session:
    fields = {
        "id": sid,
        "project_id": "default-1",
        "project_name": "Deep Work",
        "start_time": end - 60_000,
        "end_time": end,
        "duration_seconds": 60,
        "color": "purple",
    }
    fields.update(kwargs)
    return Session(**fields)


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class TestSubscriptions:
    def test_delivers_current_value_immediately(self, store):
        seen = []
        store.subscribe_sessions(USER, seen.append)
        assert seen == [[]]

    def test_projects_seeded_once(self, store):
        first = read_once(store.subscribe_projects, USER)
        second = read_once(store.subscribe_projects, USER)

        assert first == list(DEFAULT_PROJECTS)
        assert second == first

    def test_settings_created_with_defaults(self, store):
        seen = []
        store.subscribe_settings(USER, seen.append)

        assert seen[0] == Settings()
        assert read_once(store.subscribe_settings, USER) == Settings()

    def test_no_timer(self, store):
        assert read_once(store.subscribe_active_timer, USER) is None

    def test_delivers_after_writes(self, store):
        seen = []
        store.subscribe_sessions(USER, seen.append)
        session = make_session("s1", T0)

        store.create_session(USER, session)

        assert seen[-1] == [session]

    def test_unsubscribe_stops_delivery(self, store):
        seen = []
        unsubscribe = store.subscribe_sessions(USER, seen.append)
        unsubscribe()

        store.create_session(USER, make_session("s1", T0))
        assert seen == [[]]

    def test_failing_subscriber_does_not_break_others(self, store):
        def broken(value):
            if value:
                raise RuntimeError("subscriber bug")

        seen = []
        store.subscribe_sessions(USER, broken)
        store.subscribe_sessions(USER, seen.append)

        store.create_session(USER, make_session("s1", T0))
        assert len(seen[-1]) == 1

    def test_users_are_isolated(self, store):
        store.create_session("alice", make_session("s1", T0))
        assert read_once(store.subscribe_sessions, "bob") == []


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class TestSessions:
    def test_ordered_by_end_time_descending(self, store):
        store.create_session(USER, make_session("old", T0))
        store.create_session(USER, make_session("new", T0 + 120_000))
        store.create_session(USER, make_session("mid", T0 + 60_000))

        ids = [s.id for s in read_once(store.subscribe_sessions, USER)]
        assert ids == ["new", "mid", "old"]

    def test_round_trips_all_fields(self, store):
        session = make_session("s1", T0, notes="ch. 3", tags=("exam", "math"), color="red")
        store.create_session(USER, session)
        assert read_once(store.subscribe_sessions, USER) == [session]

    def test_update(self, store):
        store.create_session(USER, make_session("s1", T0))
        edited = make_session("s1", T0, notes="edited", tags=("x",))

        store.update_session(USER, edited)
        assert read_once(store.subscribe_sessions, USER) == [edited]

    def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            store.update_session(USER, make_session("ghost", T0))

    def test_delete(self, store):
        store.create_session(USER, make_session("s1", T0))
        store.delete_session(USER, "s1")
        assert read_once(store.subscribe_sessions, USER) == []

    def test_delete_missing_is_noop(self, store):
        seen = []
        store.subscribe_sessions(USER, seen.append)
        store.delete_session(USER, "ghost")
        assert seen == [[]]


# ---------------------------------------------------------------------------
# Active timer
# ---------------------------------------------------------------------------


class TestActiveTimer:
    def test_set_stores_document(self, store):
        timer = PomodoroTimer(start_time=T0, initial_duration=1500, project_name="Deep Work")
        store.set_active_timer(USER, timer)
        assert read_once(store.subscribe_active_timer, USER) == timer.to_document()

    def test_set_replaces(self, store):
        store.set_active_timer(USER, PomodoroTimer(start_time=T0, initial_duration=1500))
        store.set_active_timer(USER, PomodoroTimer(start_time=T0 + 1, initial_duration=600))

        assert read_once(store.subscribe_active_timer, USER)["startTime"] == T0 + 1

    def test_patch_merges_and_removes(self, store):
        store.set_active_timer(USER, PomodoroTimer(start_time=T0, initial_duration=1500))
        store.patch_active_timer(USER, {"isActive": False, "pausedAt": T0 + 5_000})
        store.patch_active_timer(USER, {"isActive": True, "pausedAt": None, "pausedDuration": 3.0})

        doc = read_once(store.subscribe_active_timer, USER)
        assert doc["isActive"] is True
        assert doc["pausedDuration"] == 3.0
        assert "pausedAt" not in doc
        assert doc["initialDuration"] == 1500

    def test_patch_without_timer_is_noop(self, store):
        store.patch_active_timer(USER, {"notes": "x"})
        assert read_once(store.subscribe_active_timer, USER) is None

    def test_delete(self, store):
        seen = []
        store.set_active_timer(USER, PomodoroTimer(start_time=T0))
        store.subscribe_active_timer(USER, seen.append)

        store.delete_active_timer(USER)
        store.delete_active_timer(USER)

        assert seen[-1] is None
        assert len(seen) == 2


# ---------------------------------------------------------------------------
# Projects & settings
# ---------------------------------------------------------------------------


class TestProjectsAndSettings:
    def test_add_project_generates_id(self, store):
        read_once(store.subscribe_projects, USER)
        project = store.add_project(USER, "Writing", "green")

        assert project.id
        assert read_once(store.subscribe_projects, USER)[-1] == project

    def test_update_project(self, store):
        read_once(store.subscribe_projects, USER)

        renamed = store.update_project(USER, "default-2", name="Reading")
        assert renamed.name == "Reading"
        assert renamed.color == "blue"

        recolored = store.update_project(USER, "default-2", color="red")
        assert recolored.name == "Reading"
        assert recolored.color == "red"

    def test_update_missing_project(self, store):
        with pytest.raises(NotFoundError):
            store.update_project(USER, "ghost", name="x")

    def test_delete_project_keeps_sessions(self, store):
        read_once(store.subscribe_projects, USER)
        store.create_session(USER, make_session("s1", T0))

        store.delete_project(USER, "default-1")

        ids = [p.id for p in read_once(store.subscribe_projects, USER)]
        assert ids == ["default-2", "default-3"]
        assert read_once(store.subscribe_sessions, USER)[0].project_name == "Deep Work"

    def test_update_settings(self, store):
        store.update_settings(USER, Settings(timer_duration=50, dark_mode=True))
        assert read_once(store.subscribe_settings, USER) == Settings(
            timer_duration=50, dark_mode=True
        )
