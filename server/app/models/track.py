from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.time import utcnow
from app.models.base import Base


class Track(Base):
    __tablename__ = "tracks"
    __table_args__ = (CheckConstraint("votes >= 0", name="ck_track_votes_non_negative"),)

    # Catalog (Spotify) track id
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    artist: Mapped[str] = mapped_column(String(255))
    genre: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    popularity: Mapped[int] = mapped_column(Integer, default=0)
    album_art: Mapped[str | None] = mapped_column(String(500), nullable=True)
    released_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Voting
    votes: Mapped[int] = mapped_column(Integer, default=0)

    track_votes: Mapped[list["TrackVote"]] = relationship(
        "TrackVote", back_populates="track", cascade="all, delete-orphan"
    )
