"""UTC datetime utilities.

``utcnow()`` returns **naive** UTC datetimes (no tzinfo), compatible with
SQLAlchemy ``DateTime`` columns on both SQLite and PostgreSQL without
``timezone=True``. Leaderboard time windows are resolved here as well.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum


class TimeWindow(str, Enum):
    LAST_30_DAYS = "30-last-days"
    LAST_3_MONTHS = "3-last-months"
    LAST_6_MONTHS = "6-last-months"
    LAST_12_MONTHS = "12-last-months"


WINDOW_DAYS: dict[TimeWindow, int] = {
    TimeWindow.LAST_30_DAYS: 30,
    TimeWindow.LAST_3_MONTHS: 90,
    TimeWindow.LAST_6_MONTHS: 180,
    TimeWindow.LAST_12_MONTHS: 365,
}


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


def window_start(window: TimeWindow, now: datetime | None = None) -> datetime:
    """Return the earliest datetime included in a leaderboard window."""
    now = now or utcnow()
    return now - timedelta(days=WINDOW_DAYS[TimeWindow(window)])
