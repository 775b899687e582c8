from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.time import utcnow
from app.models.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("remaining_votes >= 0", name="ck_remaining_votes_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    remaining_votes: Mapped[int] = mapped_column(Integer, default=0)
    # None means the quota has never been granted
    last_vote_refresh: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    votes: Mapped[list["TrackVote"]] = relationship(
        "TrackVote",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="TrackVote.id",
    )
