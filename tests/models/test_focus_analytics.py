"""Unit tests for shadfocus_cli.models.focus.analytics."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from shadfocus_cli.models import Session
from shadfocus_cli.models.focus.analytics import (
    UNKNOWN_PROJECT,
    daily_minutes,
    filter_sessions,
    period_start,
    project_breakdown,
    total_seconds,
)


def local_ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


NOW = local_ms(2024, 3, 15, 14, 30)


def make_session(sid, end, duration=600, *, name="Deep Work", tags=()):
    return Session(
        id=sid,
        project_id="p",
        project_name=name,
        start_time=end - duration * 1000,
        end_time=end,
        duration_seconds=duration,
        tags=tags,
    )


# ---------------------------------------------------------------------------
# period_start
# ---------------------------------------------------------------------------


class TestPeriodStart:
    def test_all(self):
        assert period_start("all", NOW) is None

    def test_day_is_local_midnight(self):
        assert period_start("day", NOW) == local_ms(2024, 3, 15)

    def test_week_is_seven_days_before_midnight(self):
        assert period_start("week", NOW) == local_ms(2024, 3, 15) - 7 * 86_400_000

    def test_month_is_first_of_month(self):
        assert period_start("month", NOW) == local_ms(2024, 3, 1)

    def test_unknown(self):
        with pytest.raises(ValueError):
            period_start("year", NOW)


# ---------------------------------------------------------------------------
# filter_sessions
# ---------------------------------------------------------------------------


class TestFilterSessions:
    def setup_method(self):
        self.today = make_session("today", local_ms(2024, 3, 15, 9), tags=("Work",))
        self.last_week = make_session("week", local_ms(2024, 3, 10, 9), tags=("reading",))
        self.old = make_session("old", local_ms(2024, 1, 2, 9), tags=("homework",))
        self.sessions = [self.old, self.today, self.last_week]

    def test_all_sorted_newest_first(self):
        result = filter_sessions(self.sessions, now=NOW)
        assert [s.id for s in result] == ["today", "week", "old"]

    def test_day(self):
        assert filter_sessions(self.sessions, "day", now=NOW) == [self.today]

    def test_week(self):
        result = filter_sessions(self.sessions, "week", now=NOW)
        assert [s.id for s in result] == ["today", "week"]

    def test_month(self):
        result = filter_sessions(self.sessions, "month", now=NOW)
        assert [s.id for s in result] == ["today", "week"]

    def test_tag_is_case_insensitive_substring(self):
        result = filter_sessions(self.sessions, tag="WORK", now=NOW)
        assert [s.id for s in result] == ["today", "old"]

    def test_blank_tag_matches_everything(self):
        assert len(filter_sessions(self.sessions, tag="  ", now=NOW)) == 3

    def test_period_and_tag_combined(self):
        assert filter_sessions(self.sessions, "week", "work", now=NOW) == [self.today]


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class TestAggregates:
    def test_total_seconds(self):
        sessions = [make_session("a", NOW, 600), make_session("b", NOW, 45)]
        assert total_seconds(sessions) == 645
        assert total_seconds([]) == 0

    def test_daily_minutes_oldest_first(self):
        sessions = [
            make_session("a", local_ms(2024, 3, 15, 10), 1500),
            make_session("b", local_ms(2024, 3, 14, 10), 600),
            make_session("c", local_ms(2024, 3, 15, 12), 100),
        ]
        assert daily_minutes(sessions) == [
            (date(2024, 3, 14), 10.0),
            (date(2024, 3, 15), 26.67),
        ]

    def test_project_breakdown(self):
        sessions = [
            make_session("a", NOW, 1500, name="Deep Work"),
            make_session("b", NOW, 300, name="Study"),
            make_session("c", NOW, 900, name="Deep Work"),
            make_session("d", NOW, 120, name=""),
        ]
        breakdown = dict(project_breakdown(sessions))

        assert breakdown == {"Deep Work": 40.0, "Study": 5.0, UNKNOWN_PROJECT: 2.0}

    def test_project_breakdown_drops_zero(self):
        sessions = [make_session("a", NOW, 0, name="Idle")]
        assert project_breakdown(sessions) == []
