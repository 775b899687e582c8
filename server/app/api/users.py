from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.models.user import User
from app.schemas.user import MeResponse
from app.services.quota import apply_quota_refresh, next_refresh_at
from app.services.vote import voted_track_ids

router = APIRouter()


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> MeResponse:
    """Current user's votes and quota, refreshed if a new period started."""
    apply_quota_refresh(db, current_user)
    return MeResponse(
        email=current_user.email,
        is_admin=current_user.is_admin,
        voted_tracks=voted_track_ids(db, current_user.id),
        remaining_votes=current_user.remaining_votes,
        last_vote_refresh=current_user.last_vote_refresh,
        next_vote_refresh=next_refresh_at(current_user),
    )
