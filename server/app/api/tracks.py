"""Track catalog and leaderboard endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.time import TimeWindow
from app.schemas.track import CatalogTrack, GenreOut, TrackOut
from app.services.leaderboard import (
    DEFAULT_LIMIT,
    Direction,
    SortBy,
    get_leaderboard,
    get_track,
    list_genres,
)
from app.services.spotify import CatalogUnavailableError, get_popular_tracks

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/popular", response_model=list[CatalogTrack])
def popular_tracks(limit: int = Query(default=50, ge=1, le=100)) -> list[CatalogTrack]:
    """Popular tracks straight from the catalog source."""
    try:
        return get_popular_tracks(limit)
    except CatalogUnavailableError as e:
        logger.error("Popular tracks unavailable: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch tracks")


@router.get("/leaderboard", response_model=list[TrackOut])
def leaderboard(
    genre: str | None = Query(default=None, max_length=100),
    sort_by: SortBy = Query(default=SortBy.POPULARITY, alias="sortBy"),
    window: TimeWindow = Query(default=TimeWindow.LAST_30_DAYS),
    direction: Direction = Query(default=Direction.DECREASING),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
) -> list[TrackOut]:
    tracks = get_leaderboard(
        db, genre=genre, sort_by=sort_by, window=window, direction=direction, limit=limit
    )
    return [TrackOut.model_validate(t) for t in tracks]


@router.get("/genres", response_model=list[GenreOut])
def genres(db: Session = Depends(get_db)) -> list[GenreOut]:
    return [GenreOut.model_validate(g) for g in list_genres(db)]


@router.get("/{track_id}", response_model=TrackOut)
def track_detail(track_id: str, db: Session = Depends(get_db)) -> TrackOut:
    track = get_track(db, track_id)
    if not track:
        raise HTTPException(status_code=404, detail="Track not found")
    return TrackOut.model_validate(track)
