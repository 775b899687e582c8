import logging
import threading
import time
from datetime import datetime

import spotipy
from requests.exceptions import ReadTimeout, Timeout
from spotipy.oauth2 import SpotifyClientCredentials

from app.core.config import get_settings
from app.schemas.track import CatalogTrack

settings = get_settings()
logger = logging.getLogger(__name__)

# Timeout settings (connect, read)
SPOTIFY_TIMEOUT = (5, 10)  # 5s connect, 10s read
MAX_RETRIES = 2
INITIAL_BACKOFF = 0.5  # seconds
MAX_PLAYLIST_LIMIT = 100

# Initialize Spotify client with client credentials flow (thread-safe)
_sp: spotipy.Spotify | None = None
_sp_lock = threading.Lock()


class CatalogUnavailableError(Exception):
    """Raised when the catalog source cannot be reached or answers with an error."""


def _get_spotify_client() -> spotipy.Spotify:
    """Get or create the Spotify client (double-checked locking)."""
    global _sp
    if _sp is not None:
        return _sp
    with _sp_lock:
        if _sp is not None:
            return _sp
        if not settings.spotify_client_id or not settings.spotify_client_secret:
            raise CatalogUnavailableError(
                "Spotify credentials not configured. "
                "Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET in your .env file."
            )
        auth_manager = SpotifyClientCredentials(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
        )
        _sp = spotipy.Spotify(
            auth_manager=auth_manager,
            requests_timeout=SPOTIFY_TIMEOUT,
        )
    return _sp


def get_popular_tracks(limit: int = 50) -> list[CatalogTrack]:
    """Fetch the configured popular-tracks playlist from Spotify with retry logic."""
    sp = _get_spotify_client()
    limit = max(1, min(limit, MAX_PLAYLIST_LIMIT))

    response = None
    last_exception = None

    for attempt in range(MAX_RETRIES + 1):
        try:
            response = sp.playlist_items(
                settings.spotify_popular_playlist_id,
                limit=limit,
                additional_types=("track",),
            )
            break
        except (Timeout, ReadTimeout) as e:
            last_exception = e
            if attempt < MAX_RETRIES:
                backoff = INITIAL_BACKOFF * (2**attempt)
                logger.warning(
                    f"Spotify API timeout (attempt {attempt + 1}/{MAX_RETRIES + 1}), "
                    f"retrying in {backoff}s: {e}"
                )
                time.sleep(backoff)
            else:
                logger.error(f"Spotify API timeout after {MAX_RETRIES + 1} attempts: {e}")
        except Exception as e:
            logger.error(f"Spotify API error: {e}")
            raise CatalogUnavailableError(str(e)) from e

    if response is None:
        raise CatalogUnavailableError(f"Spotify API failed after retries: {last_exception}")

    results = []
    for item in response.get("items", []):
        track = (item or {}).get("track")
        if not track:
            continue
        parsed = _parse_track(track)
        if parsed is not None:
            results.append(parsed)
    return results


def _parse_track(track: dict) -> CatalogTrack | None:
    title = track.get("name", "")
    spotify_id = track.get("id")
    if not title or not spotify_id:
        # Local files and removed tracks have no catalog id
        return None

    # Join all artists, not just the first
    artists = track.get("artists", [])
    artist = ", ".join(a.get("name", "") for a in artists if a.get("name")) or "Unknown Artist"

    album = track.get("album", {}) or {}

    # Get album art (prefer 300x300, fall back to first available)
    album_art = None
    images = album.get("images", [])
    if images:
        for img in images:
            if img.get("width") == 300 or img.get("height") == 300:
                album_art = img.get("url")
                break
        if not album_art:
            album_art = images[0].get("url")

    return CatalogTrack(
        id=spotify_id,
        title=title,
        artist=artist,
        album=album.get("name"),
        popularity=track.get("popularity", 0),
        album_art=album_art,
        preview_url=track.get("preview_url"),
        url=f"https://open.spotify.com/track/{spotify_id}",
        released_at=parse_release_date(
            album.get("release_date"), album.get("release_date_precision")
        ),
    )


def parse_release_date(value: str | None, precision: str | None = None) -> datetime | None:
    """Parse Spotify's release date, which may be a year, a month or a full day."""
    if not value:
        return None
    formats = {"year": "%Y", "month": "%Y-%m", "day": "%Y-%m-%d"}
    candidates = [formats[precision]] if precision in formats else list(formats.values())[::-1]
    for fmt in candidates:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    logger.warning("Unparseable Spotify release date %r", value)
    return None
