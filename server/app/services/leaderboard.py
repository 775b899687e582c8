"""Read-only ranking queries over tracks."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.time import TimeWindow, window_start
from app.models.track import Track

DEFAULT_LIMIT = 50


class SortBy(str, Enum):
    POPULARITY = "popularity"
    VOTES = "votes"


class Direction(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"


@dataclass
class GenreCount:
    genre: str
    track_count: int


def get_leaderboard(
    db: Session,
    genre: str | None = None,
    sort_by: SortBy = SortBy.POPULARITY,
    window: TimeWindow = TimeWindow.LAST_30_DAYS,
    direction: Direction = Direction.DECREASING,
    limit: int = DEFAULT_LIMIT,
    now: datetime | None = None,
) -> list[Track]:
    """
    Rank tracks released inside the window by popularity or votes.
    Ties are broken by track id so the order is stable between calls.
    """
    column = Track.votes if SortBy(sort_by) == SortBy.VOTES else Track.popularity
    ordering = column.asc() if Direction(direction) == Direction.INCREASING else column.desc()

    query = db.query(Track).filter(
        Track.released_at.is_not(None),
        Track.released_at >= window_start(window, now),
    )
    if genre:
        query = query.filter(func.lower(Track.genre) == genre.strip().lower())

    return query.order_by(ordering, Track.id.asc()).limit(limit).all()


def list_genres(db: Session) -> list[GenreCount]:
    """Genres present in the catalog with their track counts, largest first."""
    rows = (
        db.query(Track.genre, func.count(Track.id))
        .filter(Track.genre.is_not(None))
        .group_by(Track.genre)
        .order_by(func.count(Track.id).desc(), Track.genre.asc())
        .all()
    )
    return [GenreCount(genre=genre, track_count=count) for genre, count in rows]


def get_track(db: Session, track_id: str) -> Track | None:
    return db.get(Track, track_id)
