from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.time import utcnow
from app.models.base import Base


class TrackVote(Base):
    """One active vote: a user's vote on a track."""

    __tablename__ = "track_votes"
    __table_args__ = (UniqueConstraint("user_id", "track_id", name="uq_track_vote"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    track_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("tracks.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="votes")
    track: Mapped["Track"] = relationship("Track", back_populates="track_votes")
