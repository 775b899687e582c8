"""Vote quota policy: periodic refresh and cast eligibility."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import StoreFailure
from app.core.time import utcnow
from app.models.user import User

logger = logging.getLogger(__name__)


def refresh_period() -> timedelta:
    return timedelta(days=get_settings().vote_refresh_days)


def is_refresh_due(now: datetime, last_refresh: datetime | None, period: timedelta) -> bool:
    """A refresh is due when the quota was never granted or a full period has elapsed."""
    if last_refresh is None:
        return True
    return now - last_refresh >= period


def refresh(
    now: datetime,
    last_refresh: datetime | None,
    current_quota: int,
    *,
    allowance: int,
    period: timedelta,
) -> int:
    """
    Return the quota a user holds at ``now``.
    Resets to ``allowance`` once per period; unused votes do not carry over.
    """
    if is_refresh_due(now, last_refresh, period):
        return allowance
    return current_quota


def can_cast_vote(user: User) -> bool:
    """Admins bypass the quota; everyone else needs at least one vote left."""
    return user.is_admin or user.remaining_votes > 0


def next_refresh_at(user: User, period: timedelta | None = None) -> datetime | None:
    if user.last_vote_refresh is None:
        return None
    return user.last_vote_refresh + (period or refresh_period())


def apply_quota_refresh(db: Session, user: User, now: datetime | None = None) -> bool:
    """
    Replenish the user's quota if a refresh is due and persist it.
    Returns True when the stored quota was refreshed.

    The write only lands if ``last_vote_refresh`` still holds the value read
    here. A concurrent request that already refreshed (and maybe spent a vote)
    wins, and the user is reloaded instead.
    """
    now = now or utcnow()
    settings = get_settings()
    period = refresh_period()

    last_refresh = user.last_vote_refresh
    if not is_refresh_due(now, last_refresh, period):
        return False

    quota = refresh(
        now,
        last_refresh,
        user.remaining_votes,
        allowance=settings.vote_allowance,
        period=period,
    )
    unchanged = (
        User.last_vote_refresh.is_(None)
        if last_refresh is None
        else User.last_vote_refresh == last_refresh
    )
    try:
        result = db.execute(
            update(User)
            .where(User.id == user.id, unchanged)
            .values(remaining_votes=quota, last_vote_refresh=now)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to refresh vote quota for user %s", user.id)
        raise StoreFailure from e
    db.refresh(user)

    if result.rowcount == 0:
        logger.info("Vote quota for user %s was refreshed concurrently", user.id)
        return False
    logger.info("Refreshed vote quota for user %s to %d", user.id, user.remaining_votes)
    return True
