"""
Exception classes for SongSync.

Every failure the resolution workflow can report is represented here so
callers can tell "nothing matched" apart from "the network is down".

Exception Hierarchy:
    SongSyncError (base)
        ConfigError - Invalid or incomplete configuration
        TokenError - Access token could not be obtained
        SpotifyError - Catalog search failed
            EmptyQueryException - Nothing to search for
            NoTrackFoundException - Search returned no tracks
        LyricsError - Lyrics API could not be reached or parsed
        LibraryError - Local music directory could not be scanned
"""

from typing import Any, Dict, Optional


class SongSyncError(Exception):
    """
    Base exception for all SongSync errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (query, URL,
                 original error) used for logging.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SongSyncError):
    """
    Raised when the configuration cannot be used.

    Common causes:
        - Unknown token strategy
        - client_credentials strategy selected without client id/secret
        - config.yaml has invalid YAML syntax
    """
    pass


class TokenError(SongSyncError):
    """
    Raised when an access token cannot be obtained.

    Wraps HTTP errors from the token endpoint and responses that do not
    contain a token field.
    """
    pass


class SpotifyError(SongSyncError):
    """Raised when a catalog request fails for reasons other than 'no match'."""
    pass


class EmptyQueryException(SpotifyError):
    """
    Raised when both the song name and the artist name are blank.

    Searching with an empty query would return arbitrary tracks, so the
    request is never sent.
    """

    def __init__(self, message: str = "Search query is empty", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)


class NoTrackFoundException(SpotifyError):
    """Raised when the catalog search returns no tracks for the query."""

    def __init__(self, message: str = "No track found", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)


class LyricsError(SongSyncError):
    """
    Raised when the lyrics API cannot be reached or returns garbage.

    A well-formed "no lyrics" answer is not an error; the provider returns
    None for that case.
    """
    pass


class LibraryError(SongSyncError):
    """Raised when the local music directory does not exist or cannot be read."""
    pass
