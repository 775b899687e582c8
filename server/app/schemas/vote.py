"""Pydantic schemas for voting."""

from app.schemas.common import CamelModel
from app.schemas.track import TrackOut


class VoteResponse(CamelModel):
    track: TrackOut
    voted_tracks: list[str]
    remaining_votes: int


class VoteCountDriftOut(CamelModel):
    track_id: str
    stored_votes: int
    actual_votes: int


class ReconcileResponse(CamelModel):
    repaired: list[VoteCountDriftOut]
