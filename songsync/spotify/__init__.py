"""
Spotify integration package

1. Client Module (client.py): catalog search with token handling and
   rate-limit recovery, plus track URL parsing.
2. Models Module (models.py): catalog entities, resolution results, local
   songs and lyrics payloads.

Usage Example:

    from songsync.spotify import get_spotify_client, SongInfo

    client = get_spotify_client()
    info = client.get_song_info(SongInfo("Creep", "Radiohead"))
    print(info.song_name, info.artist_name, info.song_link)
"""

from .client import (
    get_spotify_client,
    reset_spotify_client,
    SpotifyClient,
    extract_track_id,
    normalize_track_link
)

from .models import (
    # Spotify catalog entities
    SpotifyTrack,
    SpotifyArtist,
    SpotifyAlbum,

    # Resolution data
    SongInfo,
    Song,
    ResolutionStatus,

    # Lyrics payload
    SyncedLine,
    LyricsResponse
)

__all__ = [
    # === CLIENT COMPONENTS ===
    'get_spotify_client',
    'reset_spotify_client',
    'SpotifyClient',
    'extract_track_id',
    'normalize_track_link',

    # === DATA MODELS ===
    'SpotifyTrack',
    'SpotifyArtist',
    'SpotifyAlbum',
    'SongInfo',
    'Song',
    'ResolutionStatus',
    'SyncedLine',
    'LyricsResponse'
]
