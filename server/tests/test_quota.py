"""Tests for the vote quota policy."""

from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.time import utcnow
from app.models.track_vote import TrackVote
from app.models.user import User
from app.services.quota import (
    apply_quota_refresh,
    can_cast_vote,
    is_refresh_due,
    next_refresh_at,
    refresh,
)
from app.services.vote import cast_vote

PERIOD = timedelta(days=30)
NOW = datetime(2026, 3, 31, 12, 0, 0)


class TestRefreshPolicy:
    def test_never_refreshed_gets_allowance(self):
        assert refresh(NOW, None, 0, allowance=10, period=PERIOD) == 10

    def test_within_period_keeps_current_quota(self):
        last = NOW - timedelta(days=29, hours=23)
        assert refresh(NOW, last, 2, allowance=10, period=PERIOD) == 2

    def test_exactly_one_period_resets(self):
        assert refresh(NOW, NOW - PERIOD, 2, allowance=10, period=PERIOD) == 10

    def test_unused_votes_do_not_carry_over(self):
        last = NOW - timedelta(days=90)
        assert refresh(NOW, last, 7, allowance=5, period=PERIOD) == 5

    def test_is_refresh_due(self):
        assert is_refresh_due(NOW, None, PERIOD) is True
        assert is_refresh_due(NOW, NOW - timedelta(days=1), PERIOD) is False
        assert is_refresh_due(NOW, NOW - timedelta(days=31), PERIOD) is True


class TestEligibility:
    def test_votes_left(self):
        assert can_cast_vote(User(email="a@example.com", is_admin=False, remaining_votes=1))

    def test_no_votes_left(self):
        user = User(email="a@example.com", is_admin=False, remaining_votes=0)
        assert can_cast_vote(user) is False

    def test_admin_without_votes(self):
        user = User(email="a@example.com", is_admin=True, remaining_votes=0)
        assert can_cast_vote(user) is True


class TestApplyQuotaRefresh:
    def test_new_user_receives_allowance(self, db: Session):
        user = User(email="new@example.com", remaining_votes=0)
        db.add(user)
        db.commit()

        assert apply_quota_refresh(db, user, NOW) is True
        db.refresh(user)
        assert user.remaining_votes == get_settings().vote_allowance
        assert user.last_vote_refresh == NOW

    def test_recent_refresh_is_kept(self, db: Session, voter: User):
        before = voter.last_vote_refresh
        assert apply_quota_refresh(db, voter) is False
        db.refresh(voter)
        assert voter.remaining_votes == 3
        assert voter.last_vote_refresh == before

    def test_expired_period_resets(self, db: Session, voter: User):
        voter.last_vote_refresh = utcnow() - timedelta(days=get_settings().vote_refresh_days)
        voter.remaining_votes = 0
        db.commit()

        assert apply_quota_refresh(db, voter) is True
        assert voter.remaining_votes == get_settings().vote_allowance

    def test_next_refresh_at(self, voter: User):
        expected = voter.last_vote_refresh + timedelta(days=get_settings().vote_refresh_days)
        assert next_refresh_at(voter) == expected
        assert next_refresh_at(User(email="x@example.com")) is None

    def test_stale_refresh_does_not_overwrite_spent_vote(
        self, db: Session, other_db: Session, voter: User, track
    ):
        voter.last_vote_refresh = None
        voter.remaining_votes = 0
        db.commit()
        allowance = get_settings().vote_allowance

        # The other request read the user while the refresh was still due
        stale = other_db.get(User, voter.id)
        assert stale.last_vote_refresh is None

        cast_vote(db, voter.email, track.id)

        assert apply_quota_refresh(other_db, stale) is False
        assert stale.remaining_votes == allowance - 1
        votes = db.query(TrackVote).filter(TrackVote.user_id == voter.id).count()
        db.refresh(voter)
        assert voter.remaining_votes + votes <= allowance
