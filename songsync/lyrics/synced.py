"""
Synced lyrics retrieval from the Spotify lyrics API

The lyrics API takes an open.spotify.com track link and answers with the
time-synced lines Spotify shows in its own players:

    GET {api_url}?url=https://open.spotify.com/track/...&format=lrc

    {
        "error": false,
        "syncType": "LINE_SYNCED",
        "lines": [
            {"timeTag": "00:12.34", "words": "First line"},
            ...
        ]
    }

When the API has no lyrics for a track it sets "error" to true (and answers
with HTTP 404). That case is not an exception: get_synced_lyrics() returns
None. Transport failures and malformed payloads raise LyricsError.

Connection errors and timeouts are retried with exponential backoff
(network.max_retries attempts, starting at network.retry_delay seconds).
"""

from typing import Any, Dict, Optional

import requests

from ..config.settings import Settings, get_settings
from ..exceptions import LyricsError
from ..spotify.models import LyricsResponse
from ..utils.helpers import retry_on_failure
from ..utils.logger import get_logger
from .lrc import format_lrc


class SyncedLyricsProvider:
    """
    Client for the Spotify lyrics API

    Attributes:
        api_url: Base URL of the lyrics API
        timeout: Per-request timeout in seconds
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__)

        self.api_url = self.settings.lyrics.api_url
        self.format = self.settings.lyrics.format
        self.timeout = self.settings.lyrics.timeout

        # Only transient transport errors are worth retrying
        self._request = retry_on_failure(
            max_attempts=max(1, self.settings.network.max_retries),
            delay=self.settings.network.retry_delay,
            exceptions=(requests.ConnectionError, requests.Timeout)
        )(self._send)

    def _send(self, song_link: str) -> requests.Response:
        return requests.get(
            self.api_url,
            params={'url': song_link, 'format': self.format},
            timeout=self.timeout
        )

    def fetch_lyrics(self, song_link: str) -> LyricsResponse:
        """
        Fetch and parse the lyrics payload for a track

        Args:
            song_link: open.spotify.com track URL

        Returns:
            Parsed LyricsResponse (error=True when no lyrics exist)

        Raises:
            LyricsError: On network failure, unexpected HTTP status or bad JSON
        """
        try:
            response = self._request(song_link)
        except requests.RequestException as e:
            raise LyricsError(
                f"Could not reach lyrics API: {e}",
                details={'url': self.api_url, 'song_link': song_link, 'original_error': str(e)}
            ) from e

        try:
            if response.status_code == 404:
                self.logger.debug(f"Lyrics API has no lyrics for {song_link}")
                return LyricsResponse(error=True)

            if not response.ok:
                raise LyricsError(
                    f"Lyrics API returned HTTP {response.status_code}",
                    details={'url': self.api_url, 'song_link': song_link}
                )

            try:
                data: Dict[str, Any] = response.json()
            except ValueError as e:
                raise LyricsError(
                    "Lyrics API returned invalid JSON",
                    details={'url': self.api_url, 'song_link': song_link, 'original_error': str(e)}
                ) from e
        finally:
            response.close()

        if not isinstance(data, dict):
            raise LyricsError(
                "Lyrics API returned an unexpected payload",
                details={'url': self.api_url, 'song_link': song_link}
            )

        return LyricsResponse.from_api_data(data)

    def get_synced_lyrics(self, song_link: str) -> Optional[str]:
        """
        Get synced lyrics for a track as LRC text

        Args:
            song_link: open.spotify.com track URL

        Returns:
            "[timeTag]words" lines joined with newlines, or None when the API
            has no lyrics for the track

        Raises:
            LyricsError: On network failure or malformed response
        """
        result = self.fetch_lyrics(song_link)

        if result.error:
            return None

        self.logger.debug(f"Fetched {len(result.lines)} lines ({result.sync_type}) for {song_link}")
        return format_lrc(result.lines)


# Global provider instance
_synced_lyrics_provider: Optional[SyncedLyricsProvider] = None


def get_synced_lyrics_provider() -> SyncedLyricsProvider:
    """Get the global lyrics provider (singleton pattern)"""
    global _synced_lyrics_provider
    if not _synced_lyrics_provider:
        _synced_lyrics_provider = SyncedLyricsProvider()
    return _synced_lyrics_provider


def reset_synced_lyrics_provider() -> None:
    """Forget the global lyrics provider"""
    global _synced_lyrics_provider
    _synced_lyrics_provider = None
