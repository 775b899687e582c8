"""Vote endpoints: cast and retract a vote on a track."""

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_identity
from app.core.rate_limit import limiter, vote_rate_limit
from app.schemas.common import ErrorResponse
from app.schemas.vote import VoteResponse
from app.services.vote import VoteResult, cast_vote, retract_vote

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _to_response(result: VoteResult) -> VoteResponse:
    return VoteResponse(
        track=result.track,
        voted_tracks=result.voted_tracks,
        remaining_votes=result.remaining_votes,
    )


@router.post("/vote/{track_id}", response_model=VoteResponse, responses=ERROR_RESPONSES)
@limiter.limit(vote_rate_limit)
def vote_for_track(
    request: Request,
    track_id: str = Path(..., min_length=1, max_length=64),
    identity: str | None = Depends(get_identity),
    db: Session = Depends(get_db),
) -> VoteResponse:
    """Spend one vote on a track. Voting twice for the same track is rejected."""
    return _to_response(cast_vote(db, identity, track_id))


@router.delete("/vote/{track_id}", response_model=VoteResponse, responses=ERROR_RESPONSES)
@limiter.limit(vote_rate_limit)
def unvote_track(
    request: Request,
    track_id: str = Path(..., min_length=1, max_length=64),
    identity: str | None = Depends(get_identity),
    db: Session = Depends(get_db),
) -> VoteResponse:
    """Withdraw a vote from a track."""
    return _to_response(retract_vote(db, identity, track_id))
