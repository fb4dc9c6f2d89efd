"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and
from the wall clock.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from shadfocus_cli.adapters.memory import InMemoryGateway
from shadfocus_cli.exceptions import GatewayError
from shadfocus_cli.models.focus.state import TimerStateMachine

USER = "user-1"
START_MS = 1_700_000_000_000


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> int:
        self.now += int(seconds * 1000)
        return self.now


@pytest.fixture()
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Gateways
# ---------------------------------------------------------------------------


class FlakyGateway(InMemoryGateway):
    """In-memory gateway whose named write methods raise GatewayError."""

    def __init__(self):
        super().__init__()
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def _maybe_fail(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise GatewayError(f"{name} unavailable")

    def create_session(self, user_id, session):
        self._maybe_fail("create_session")
        super().create_session(user_id, session)

    def set_active_timer(self, user_id, timer):
        self._maybe_fail("set_active_timer")
        super().set_active_timer(user_id, timer)

    def patch_active_timer(self, user_id, fields):
        self._maybe_fail("patch_active_timer")
        super().patch_active_timer(user_id, fields)

    def delete_active_timer(self, user_id):
        self._maybe_fail("delete_active_timer")
        super().delete_active_timer(user_id)

    def update_settings(self, user_id, settings):
        self._maybe_fail("update_settings")
        super().update_settings(user_id, settings)


@pytest.fixture()
def gateway():
    return InMemoryGateway()


@pytest.fixture()
def flaky_gateway():
    return FlakyGateway()


@pytest.fixture()
def make_machine(clock):
    """Factory for state machines driven by the fake clock, closed on teardown."""
    machines: list[TimerStateMachine] = []

    def factory(gateway, **kwargs) -> TimerStateMachine:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("debounce_seconds", 0)
        kwargs.setdefault("tick_seconds", None)
        machine = TimerStateMachine(gateway, kwargs.pop("user_id", USER), **kwargs)
        machines.append(machine)
        return machine

    yield factory
    for machine in machines:
        machine.close()


@pytest.fixture()
def machine(make_machine, gateway):
    return make_machine(gateway)


# ---------------------------------------------------------------------------
# Config isolation helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from shadfocus_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("shadfocus_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("shadfocus_cli.services.config_service.user_data_dir", return_value=tmpdir):
            from shadfocus_cli.services.config_service import ConfigService

            svc = ConfigService()
            yield svc
            svc.close_gateway()
            if get_config_service.cache_info().currsize:
                get_config_service().close_gateway()
    get_config_service.cache_clear()


@pytest.fixture()
def cli_gateway(tmp_config, gateway):
    """Route every command to one shared in-memory gateway."""
    from shadfocus_cli.services.config_service import ConfigService

    with patch.object(ConfigService, "get_gateway", return_value=gateway):
        yield gateway
