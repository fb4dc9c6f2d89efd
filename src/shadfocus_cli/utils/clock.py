"""Wall-clock helpers. Timer timestamps are epoch milliseconds."""

from __future__ import annotations

import time
from datetime import datetime


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to a local, timezone-aware datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000).astimezone()


def datetime_to_ms(value: datetime) -> int:
    """Convert a datetime (naive values are treated as local time) to epoch ms."""
    return int(value.timestamp() * 1000)
