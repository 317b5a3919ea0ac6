"""
Spotify catalog search for SongSync

This module turns a local song's title and artist into the matching Spotify
track. It is a thin layer over spotipy:

1. **Token handling**: every request asks the shared TokenProvider for a
   token, which is only re-fetched when older than 30 minutes. The spotipy
   client is rebuilt whenever the token changes.

2. **Request wrapper**: `_make_request()` retries once after a 401 (with a
   forced token refresh) and once after a 429 (after waiting Retry-After
   seconds). Every other failure becomes a SpotifyError.

3. **Resolution**: `get_song_info()` searches with limit=1 and an optional
   offset, so a caller unhappy with the first match can ask for the next one.

Usage:

    client = get_spotify_client()
    info = client.get_song_info(SongInfo("Bohemian Rhapsody", "Queen"))
    print(info.song_link)

spotipy is created with requests_session=False, so each request opens and
closes its own HTTP connection.
"""

import re
import time
from typing import Any, Dict, List, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from ..config.auth import TokenProvider, get_auth
from ..config.settings import Settings, get_settings
from ..exceptions import EmptyQueryException, NoTrackFoundException, SpotifyError
from ..utils.logger import get_logger
from .models import SongInfo, SpotifyTrack


TRACK_ID_PATTERNS = [
    r'open\.spotify\.com/(?:intl-[a-z]{2}/)?track/([a-zA-Z0-9]{22})',
    r'spotify:track:([a-zA-Z0-9]{22})',
    r'^([a-zA-Z0-9]{22})$'
]

TRACK_URL_TEMPLATE = "https://open.spotify.com/track/{}"


class SpotifyClient:
    """
    Spotify Web API client for track search

    Attributes:
        auth: Token provider shared with the rest of the application
        settings: Application settings
        _client: spotipy client bound to _client_token
    """

    def __init__(self, auth: Optional[TokenProvider] = None, settings: Optional[Settings] = None):
        """
        Initialize the client

        The spotipy connection is created lazily on the first request so that
        constructing a client never touches the network.

        Args:
            auth: Token provider, defaults to the global one
            settings: Settings, defaults to the global settings
        """
        self.settings = settings or get_settings()
        self.auth = auth or get_auth()
        self.logger = get_logger(__name__)
        self._client: Optional[spotipy.Spotify] = None
        self._client_token: Optional[str] = None

    @property
    def client(self) -> spotipy.Spotify:
        """
        spotipy client carrying a valid bearer token

        Raises:
            TokenError: If a token is needed and cannot be fetched
        """
        token = self.auth.get_token()
        if self._client is None or token != self._client_token:
            self._client = spotipy.Spotify(
                auth=token,
                requests_session=False,
                requests_timeout=self.settings.network.request_timeout,
                retries=0
            )
            self._client.prefix = self.settings.spotify.api_base_url
            self._client_token = token
        return self._client

    def _make_request(self, method_name: str, **kwargs) -> Any:
        """
        Call a spotipy method with token-expiry and rate-limit handling

        Args:
            method_name: Name of the spotipy.Spotify method to call
            **kwargs: Arguments for that method

        Returns:
            Decoded JSON response

        Raises:
            SpotifyError: For HTTP errors other than a recoverable 401/429,
                          and for network failures
        """
        try:
            try:
                return getattr(self.client, method_name)(**kwargs)
            except SpotifyException as e:
                if e.http_status == 401:
                    # Token rejected before its lifetime ran out
                    self.logger.debug("Spotify rejected the token, refreshing")
                    self.auth.invalidate()
                    return getattr(self.client, method_name)(**kwargs)
                elif e.http_status == 429:
                    retry_after = parse_retry_after(e.headers)
                    self.logger.warning(f"Rate limited by Spotify, waiting {retry_after} seconds...")
                    time.sleep(retry_after)
                    return getattr(self.client, method_name)(**kwargs)
                raise
        except SpotifyException as e:
            raise SpotifyError(
                f"Spotify API error {e.http_status}: {e.msg}",
                details={'method': method_name, 'params': kwargs, 'original_error': str(e)}
            ) from e
        except requests.RequestException as e:
            raise SpotifyError(
                f"Could not reach Spotify: {e}",
                details={'method': method_name, 'params': kwargs, 'original_error': str(e)}
            ) from e

    def search_tracks(self, query: str, limit: int = 10, offset: int = 0) -> List[SpotifyTrack]:
        """
        Search the catalog for tracks

        Args:
            query: Free-text search query (supports Spotify search syntax)
            limit: Maximum number of results to return (1-50)
            offset: Index of the first result to return

        Returns:
            Matching tracks in Spotify's relevance order (possibly empty)

        Raises:
            EmptyQueryException: If the query is blank
            SpotifyError: If the request fails
        """
        if not query or not query.strip():
            raise EmptyQueryException()

        results = self._make_request(
            'search',
            q=query,
            type='track',
            limit=limit,
            offset=offset
        )

        items = (results or {}).get('tracks', {}).get('items', [])
        return [SpotifyTrack.from_spotify_data(item) for item in items if item]

    def get_song_info(self, query: SongInfo, offset: int = 0) -> SongInfo:
        """
        Find the Spotify track for a song name and artist

        Args:
            query: SongInfo with song_name and/or artist_name filled
            offset: Skip this many results, used to try the next match when
                    the first one is wrong

        Returns:
            SongInfo with the track name, all artists joined by ", ",
            the open.spotify.com link and the album cover URL

        Raises:
            EmptyQueryException: If both song name and artist are blank
            NoTrackFoundException: If the search returns nothing
            SpotifyError: If the request fails
            TokenError: If no access token can be obtained
        """
        search = query.search_text
        if not search.strip():
            raise EmptyQueryException(details={'query': query})

        tracks = self.search_tracks(search, limit=1, offset=offset)
        if not tracks:
            raise NoTrackFoundException(
                f"No track found for '{search.strip()}'",
                details={'query': search, 'offset': offset}
            )

        track = tracks[0]
        self.logger.debug(f"Matched '{search.strip()}' to {track.all_artists} - {track.name} ({track.id})")
        return track.to_song_info()


def parse_retry_after(headers: Optional[Dict[str, str]]) -> int:
    """
    Seconds to wait from a Retry-After header

    Only the delay-seconds form is honoured; an HTTP-date or a missing or
    malformed value falls back to one second.
    """
    value = (headers or {}).get('Retry-After')
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def extract_track_id(url_or_id: str) -> str:
    """
    Extract a track ID from an open.spotify.com URL, a spotify: URI or a bare ID

    Args:
        url_or_id: Track URL, URI or 22 character ID

    Returns:
        The track ID

    Raises:
        ValueError: If no track ID can be found
    """
    value = (url_or_id or "").strip()
    for pattern in TRACK_ID_PATTERNS:
        match = re.search(pattern, value)
        if match:
            return match.group(1)
    raise ValueError(f"Invalid Spotify track URL or ID: {url_or_id}")


def normalize_track_link(url_or_id: str) -> str:
    """Canonical open.spotify.com link for a track URL, URI or ID"""
    return TRACK_URL_TEMPLATE.format(extract_track_id(url_or_id))


# Global client instance
_spotify_client: Optional[SpotifyClient] = None


def get_spotify_client() -> SpotifyClient:
    """
    Get the global Spotify client (singleton pattern)

    Returns:
        Shared SpotifyClient using the global token provider
    """
    global _spotify_client
    if not _spotify_client:
        _spotify_client = SpotifyClient()
    return _spotify_client


def reset_spotify_client() -> None:
    """Forget the global Spotify client"""
    global _spotify_client
    _spotify_client = None
