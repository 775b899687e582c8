"""Vote ledger: pairs each user's active votes with the tracks' vote counters.

A vote is a ``TrackVote`` row. Casting or retracting one changes the row and
the track's ``votes`` counter (and the user's quota) in a single database
transaction, so ``Track.votes`` always equals the number of vote rows for
that track. Duplicate votes are rejected by the ``uq_track_vote`` constraint
even when two requests pass the pre-check concurrently.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import (
    DuplicateVote,
    NotVoted,
    QuotaExceeded,
    StoreFailure,
    TrackNotFound,
    Unauthenticated,
    UserNotFound,
)
from app.models.track import Track
from app.models.track_vote import TrackVote
from app.models.user import User
from app.schemas.track import TrackOut
from app.services.auth import get_user_by_email
from app.services.quota import apply_quota_refresh, can_cast_vote

logger = logging.getLogger(__name__)


@dataclass
class VoteResult:
    track: TrackOut
    voted_tracks: list[str]
    remaining_votes: int


@dataclass
class VoteCountDrift:
    track_id: str
    stored_votes: int
    actual_votes: int


def has_voted(db: Session, user_id: int, track_id: str) -> bool:
    """Check if a user holds an active vote on a track."""
    return (
        db.query(TrackVote)
        .filter(TrackVote.user_id == user_id, TrackVote.track_id == track_id)
        .first()
        is not None
    )


def voted_track_ids(db: Session, user_id: int) -> list[str]:
    """Track ids the user currently votes for, oldest vote first."""
    rows = db.execute(
        select(TrackVote.track_id).where(TrackVote.user_id == user_id).order_by(TrackVote.id)
    )
    return list(rows.scalars())


def _snapshot(db: Session, user: User, track_id: str) -> VoteResult:
    """Read the outcome inside the open transaction, before it commits."""
    track = db.get(Track, track_id, populate_existing=True)
    db.refresh(user)
    return VoteResult(
        track=TrackOut.model_validate(track),
        voted_tracks=voted_track_ids(db, user.id),
        remaining_votes=user.remaining_votes,
    )


def cast_vote(
    db: Session, identity: str | None, track_id: str, now: datetime | None = None
) -> VoteResult:
    """
    Cast the identified user's vote on a track.
    Admins are never charged a vote but still get the vote recorded.
    Raises a VoteError subclass; nothing is written when it does.
    """
    if not identity:
        raise Unauthenticated

    user = get_user_by_email(db, identity)
    if user is None:
        raise UserNotFound

    apply_quota_refresh(db, user, now)
    if not can_cast_vote(user):
        raise QuotaExceeded

    if has_voted(db, user.id, track_id):
        raise DuplicateVote

    try:
        # Atomic increment via SQL expression to prevent lost updates
        result = db.execute(
            update(Track).where(Track.id == track_id).values(votes=Track.votes + 1)
        )
        if result.rowcount == 0:
            db.rollback()
            raise TrackNotFound

        db.add(TrackVote(user_id=user.id, track_id=track_id))
        db.flush()  # Force unique constraint check before charging the quota

        if not user.is_admin:
            # Conditional decrement: a concurrent vote may have spent the last one
            result = db.execute(
                update(User)
                .where(User.id == user.id, User.remaining_votes > 0)
                .values(remaining_votes=User.remaining_votes - 1)
            )
            if result.rowcount == 0:
                db.rollback()
                logger.warning("Quota spent concurrently for user %s", user.id)
                raise QuotaExceeded

        outcome = _snapshot(db, user, track_id)
        db.commit()
    except IntegrityError:
        # Unique constraint violation: a concurrent request already recorded this vote
        db.rollback()
        logger.warning("Concurrent duplicate vote on track %s by user %s", track_id, user.id)
        raise DuplicateVote from None
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to cast vote on track %s by user %s", track_id, user.id)
        raise StoreFailure from e

    logger.info("User %s voted for track %s", user.id, track_id)
    return outcome


def retract_vote(db: Session, identity: str | None, track_id: str) -> VoteResult:
    """
    Withdraw the identified user's vote on a track.
    The spent vote is not given back unless ``restore_vote_on_retract`` is set.
    """
    if not identity:
        raise Unauthenticated

    user = get_user_by_email(db, identity)
    if user is None or not has_voted(db, user.id, track_id):
        raise NotVoted

    settings = get_settings()
    try:
        result = db.execute(
            delete(TrackVote).where(TrackVote.user_id == user.id, TrackVote.track_id == track_id)
        )
        if result.rowcount == 0:
            # Retracted by a concurrent request
            db.rollback()
            raise NotVoted

        # Atomic decrement, clamped to 0 at SQL level
        result = db.execute(
            update(Track)
            .where(Track.id == track_id)
            .values(votes=case((Track.votes > 0, Track.votes - 1), else_=0))
        )
        if result.rowcount == 0:
            db.rollback()
            raise TrackNotFound

        if settings.restore_vote_on_retract and not user.is_admin:
            db.execute(
                update(User)
                .where(User.id == user.id)
                .values(remaining_votes=User.remaining_votes + 1)
            )

        outcome = _snapshot(db, user, track_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to retract vote on track %s by user %s", track_id, user.id)
        raise StoreFailure from e

    logger.info("User %s retracted vote for track %s", user.id, track_id)
    return outcome


def get_vote_count(db: Session, track_id: str) -> int:
    """Get the current vote count for a track."""
    track = db.get(Track, track_id)
    if not track:
        return 0
    return track.votes


def reconcile_vote_counts(db: Session) -> list[VoteCountDrift]:
    """
    Rewrite every track counter that disagrees with its vote rows.
    Returns the repaired tracks with their stored and actual counts.
    """
    counts = (
        select(TrackVote.track_id, func.count(TrackVote.id).label("total"))
        .group_by(TrackVote.track_id)
        .subquery()
    )
    actual = func.coalesce(counts.c.total, 0)
    rows = db.execute(
        select(Track, actual)
        .outerjoin(counts, counts.c.track_id == Track.id)
        .where(Track.votes != actual)
        .order_by(Track.id)
    ).all()

    drifts = []
    for track, actual_votes in rows:
        drifts.append(
            VoteCountDrift(
                track_id=track.id, stored_votes=track.votes, actual_votes=actual_votes
            )
        )
        track.votes = actual_votes

    if not drifts:
        return drifts

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to reconcile vote counts")
        raise StoreFailure from e

    for drift in drifts:
        logger.warning(
            "Repaired vote count for track %s: %d -> %d",
            drift.track_id,
            drift.stored_votes,
            drift.actual_votes,
        )
    return drifts
