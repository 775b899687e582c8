from app.models.base import Base
from app.models.track import Track
from app.models.track_vote import TrackVote
from app.models.user import User

__all__ = [
    "Base",
    "User",
    "Track",
    "TrackVote",
]
