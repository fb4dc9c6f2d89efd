"""Session history analytics: period/tag filters and per-day, per-project totals."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Literal, NamedTuple

from shadfocus_cli.models import Session
from shadfocus_cli.utils.clock import datetime_to_ms, ms_to_datetime

Period = Literal["day", "week", "month", "all"]

PERIODS: tuple[str, ...] = ("day", "week", "month", "all")

UNKNOWN_PROJECT = "Unknown Project"

_DAY_MS = 24 * 60 * 60 * 1000


class DailyMinutes(NamedTuple):
    day: date
    minutes: float


class ProjectMinutes(NamedTuple):
    name: str
    minutes: float


def period_start(period: Period, now: int) -> int | None:
    """Epoch ms at which ``period`` begins, in local time; ``None`` for all time.

    day: local midnight today. week: midnight seven days ago. month: the 1st.
    """
    if period == "all":
        return None
    local = datetime.fromtimestamp(now / 1000)
    midnight = datetime_to_ms(datetime(local.year, local.month, local.day))
    if period == "day":
        return midnight
    if period == "week":
        return midnight - 7 * _DAY_MS
    if period == "month":
        return datetime_to_ms(datetime(local.year, local.month, 1))
    raise ValueError(f"Unknown period: {period}")


def filter_sessions(
    sessions: Iterable[Session],
    period: Period = "all",
    tag: str | None = None,
    *,
    now: int,
) -> list[Session]:
    """Sessions ending within ``period`` whose tags contain ``tag``, newest first.

    The tag match is a case-insensitive substring match against each tag.
    """
    start = period_start(period, now)
    needle = tag.strip().lower() if tag else ""

    selected = []
    for session in sessions:
        if start is not None and session.end_time < start:
            continue
        if needle and not any(needle in t.lower() for t in session.tags):
            continue
        selected.append(session)
    return sorted(selected, key=lambda s: s.end_time, reverse=True)


def total_seconds(sessions: Iterable[Session]) -> int:
    return sum(s.duration_seconds for s in sessions)


def daily_minutes(sessions: Sequence[Session]) -> list[DailyMinutes]:
    """Minutes per local calendar day of ``end_time``, oldest day first."""
    grouped: dict[date, float] = {}
    for session in sessions:
        day = ms_to_datetime(session.end_time).date()
        grouped[day] = grouped.get(day, 0.0) + session.duration_seconds / 60
    return [DailyMinutes(day, round(grouped[day], 2)) for day in sorted(grouped)]


def project_breakdown(sessions: Sequence[Session]) -> list[ProjectMinutes]:
    """Minutes per project name. Projects that round to zero are left out."""
    grouped: dict[str, float] = {}
    for session in sessions:
        name = session.project_name or UNKNOWN_PROJECT
        grouped[name] = grouped.get(name, 0.0) + session.duration_seconds / 60
    breakdown = [ProjectMinutes(name, round(minutes, 2)) for name, minutes in grouped.items()]
    return [item for item in breakdown if item.minutes > 0]
