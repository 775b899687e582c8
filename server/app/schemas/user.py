from datetime import datetime

from app.schemas.common import CamelModel


class MeResponse(CamelModel):
    email: str
    is_admin: bool
    voted_tracks: list[str]
    remaining_votes: int
    last_vote_refresh: datetime | None
    next_vote_refresh: datetime | None
