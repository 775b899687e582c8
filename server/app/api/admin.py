"""Admin API endpoints for vote maintenance."""

from fastapi import APIRouter, Depends
from fastapi import Request as FastAPIRequest
from sqlalchemy.orm import Session

from app.api.deps import get_current_admin, get_db
from app.core.rate_limit import limiter
from app.models.user import User
from app.schemas.vote import ReconcileResponse, VoteCountDriftOut
from app.services.vote import reconcile_vote_counts

router = APIRouter()


@router.post("/reconcile-votes", response_model=ReconcileResponse)
@limiter.limit("6/minute")
def admin_reconcile_votes(
    request: FastAPIRequest,
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin),
) -> ReconcileResponse:
    """Recompute track vote counters from the recorded votes and repair drift."""
    drifts = reconcile_vote_counts(db)
    return ReconcileResponse(repaired=[VoteCountDriftOut.model_validate(d) for d in drifts])
