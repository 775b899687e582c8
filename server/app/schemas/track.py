from datetime import datetime

from app.schemas.common import CamelModel


class TrackOut(CamelModel):
    id: str
    title: str
    artist: str
    genre: str | None = None
    popularity: int = 0
    album_art: str | None = None
    released_at: datetime | None = None
    votes: int = 0


class CatalogTrack(CamelModel):
    """Track summary as returned by the catalog source."""

    id: str
    title: str
    artist: str
    album: str | None = None
    popularity: int = 0  # 0-100 from Spotify
    album_art: str | None = None
    preview_url: str | None = None
    url: str | None = None
    released_at: datetime | None = None


class GenreOut(CamelModel):
    genre: str
    track_count: int
