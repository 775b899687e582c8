from app.schemas.common import CamelModel, ErrorResponse
from app.schemas.track import CatalogTrack, GenreOut, TrackOut
from app.schemas.user import MeResponse
from app.schemas.vote import ReconcileResponse, VoteCountDriftOut, VoteResponse

__all__ = [
    "CamelModel",
    "CatalogTrack",
    "ErrorResponse",
    "GenreOut",
    "MeResponse",
    "ReconcileResponse",
    "TrackOut",
    "VoteCountDriftOut",
    "VoteResponse",
]
