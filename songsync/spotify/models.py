"""
Data models for Spotify search results, local songs and synced lyrics

Three groups of models live here:

1. **Spotify catalog models**: SpotifyArtist, SpotifyAlbum and SpotifyTrack,
   built from search API JSON with `from_spotify_data()`. Only the fields
   SongSync uses are kept; unknown keys in the API payload are ignored.

2. **Resolution models**: SongInfo carries a track's display data (name,
   artists, Spotify link, cover art URL). The same type is used for the
   search query (only song_name and artist_name filled) and for the result.
   Song describes a file found in the local music library.

3. **Lyrics models**: SyncedLine and LyricsResponse mirror the lyrics API
   payload.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Dict, Any


class ResolutionStatus(Enum):
    """
    Outcome of resolving one local song to synced lyrics

    Values:
        PENDING: Not attempted yet
        DOWNLOADED: Track matched and lyrics fetched (and saved, when requested)
        NOT_FOUND: Catalog search returned no track
        NO_LYRICS: Track matched but the lyrics API has no synced lyrics for it
        EMPTY_QUERY: Song has neither title nor artist to search with
        SKIPPED: An .lrc file already exists next to the song
        FAILED: Network or API error
    """
    PENDING = "pending"
    DOWNLOADED = "downloaded"
    NOT_FOUND = "not_found"
    NO_LYRICS = "no_lyrics"
    EMPTY_QUERY = "empty_query"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class SpotifyArtist:
    """
    Artist reference embedded in track and album objects

    Attributes:
        id: Spotify's unique artist identifier
        name: Artist display name
        external_urls: Links to the artist on external platforms
        uri: Spotify URI (spotify:artist:id)
    """
    id: str
    name: str
    external_urls: Dict[str, str] = field(default_factory=dict)
    uri: Optional[str] = None

    @classmethod
    def from_spotify_data(cls, data: Dict[str, Any]) -> 'SpotifyArtist':
        """
        Factory method to construct SpotifyArtist from Spotify API response data

        Args:
            data: Raw artist data from Spotify API response

        Returns:
            SpotifyArtist instance
        """
        return cls(
            id=data.get('id') or "",
            name=data.get('name') or "",
            external_urls=data.get('external_urls') or {},
            uri=data.get('uri')
        )


@dataclass
class SpotifyAlbum:
    """
    Album context of a track

    Images are kept in the order the API returns them (largest first), each
    a dictionary with 'url', 'width' and 'height' keys.
    """
    id: str
    name: str
    album_type: str = "album"
    release_date: str = ""
    artists: List[SpotifyArtist] = field(default_factory=list)
    external_urls: Dict[str, str] = field(default_factory=dict)
    images: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_spotify_data(cls, data: Dict[str, Any]) -> 'SpotifyAlbum':
        """
        Factory method for constructing SpotifyAlbum from API response data

        Args:
            data: Raw album data from Spotify API response

        Returns:
            SpotifyAlbum instance with artist objects constructed
        """
        artists = [SpotifyArtist.from_spotify_data(artist) for artist in data.get('artists') or []]

        return cls(
            id=data.get('id') or "",
            name=data.get('name') or "",
            album_type=data.get('album_type') or "album",
            release_date=data.get('release_date') or "",
            artists=artists,
            external_urls=data.get('external_urls') or {},
            images=data.get('images') or []
        )

    @property
    def cover_url(self) -> Optional[str]:
        """URL of the first (largest) album image, or None without images"""
        if not self.images:
            return None
        return self.images[0].get('url')


@dataclass
class SpotifyTrack:
    """
    A track returned by the catalog search

    Attributes:
        id: Spotify's unique track identifier
        name: Track title as published
        artists: Contributing artists in Spotify's attribution order
        album: Album context with cover images
        duration_ms: Track length in milliseconds
        external_urls: Links to the track, 'spotify' is the open.spotify.com URL
        uri: Spotify URI (spotify:track:id)
    """
    id: str
    name: str
    artists: List[SpotifyArtist]
    album: SpotifyAlbum
    duration_ms: int = 0
    explicit: bool = False
    popularity: int = 0
    external_urls: Dict[str, str] = field(default_factory=dict)
    uri: Optional[str] = None

    @classmethod
    def from_spotify_data(cls, data: Dict[str, Any]) -> 'SpotifyTrack':
        """
        Factory method for constructing SpotifyTrack from API response data

        Accepts both bare track objects (search results) and playlist-style
        items where the track is nested under a 'track' key.

        Args:
            data: Raw track data from Spotify API response

        Returns:
            SpotifyTrack instance with nested artist and album objects
        """
        track_data = data.get('track', data)

        artists = [SpotifyArtist.from_spotify_data(artist) for artist in track_data.get('artists') or []]
        album = SpotifyAlbum.from_spotify_data(track_data.get('album') or {})

        return cls(
            id=track_data.get('id') or "",
            name=track_data.get('name') or "",
            artists=artists,
            album=album,
            duration_ms=track_data.get('duration_ms') or 0,
            explicit=bool(track_data.get('explicit', False)),
            popularity=track_data.get('popularity') or 0,
            external_urls=track_data.get('external_urls') or {},
            uri=track_data.get('uri')
        )

    @property
    def duration_str(self) -> str:
        """Duration formatted as M:SS"""
        total_seconds = self.duration_ms // 1000
        minutes = total_seconds // 60
        seconds = total_seconds % 60
        return f"{minutes}:{seconds:02d}"

    @property
    def all_artists(self) -> str:
        """Comma-separated string of all artist names (e.g. "Artist1, Artist2")"""
        return ", ".join(artist.name for artist in self.artists)

    @property
    def spotify_url(self) -> Optional[str]:
        """open.spotify.com URL of the track"""
        return self.external_urls.get('spotify')

    def to_song_info(self) -> 'SongInfo':
        """Display data for this track"""
        return SongInfo(
            song_name=self.name,
            artist_name=self.all_artists,
            song_link=self.spotify_url,
            album_cover_link=self.album.cover_url
        )


@dataclass
class SongInfo:
    """
    Display-ready description of a track

    As a query only song_name and artist_name are used. As a search result
    every field is filled from the matched Spotify track.
    """
    song_name: Optional[str] = None
    artist_name: Optional[str] = None
    song_link: Optional[str] = None
    album_cover_link: Optional[str] = None

    @property
    def search_text(self) -> str:
        """Free-text search query: "{song_name} {artist_name}" with missing parts empty"""
        return f"{self.song_name or ''} {self.artist_name or ''}"


@dataclass
class Song:
    """
    An audio file from the local music library

    Attributes:
        title: Title tag, None when missing or "<unknown>"
        artist: Artist tag, None when missing or "<unknown>"
        image_path: Cover art image found beside the file, if any
        file_path: Absolute path of the audio file
    """
    title: Optional[str]
    artist: Optional[str]
    image_path: Optional[Path]
    file_path: Path

    @property
    def display_title(self) -> str:
        return self.title or self.file_path.stem

    @property
    def display_artist(self) -> str:
        return self.artist or "Unknown Artist"

    def to_query(self) -> SongInfo:
        """Search query built from this song's tags"""
        return SongInfo(song_name=self.title, artist_name=self.artist)


@dataclass
class SyncedLine:
    """One timed lyrics line, e.g. time_tag "00:12.34", words "Hello" """
    time_tag: str
    words: str

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> 'SyncedLine':
        return cls(
            time_tag=str(data.get('timeTag', '')),
            words=str(data.get('words', ''))
        )

    def to_lrc(self) -> str:
        return f"[{self.time_tag}]{self.words}"


@dataclass
class LyricsResponse:
    """
    Parsed lyrics API payload

    Attributes:
        error: True when the API has no lyrics for the track
        sync_type: "LINE_SYNCED" or "UNSYNCED" as reported by the API
        lines: Timed lines in playback order
    """
    error: bool
    sync_type: Optional[str] = None
    lines: List[SyncedLine] = field(default_factory=list)

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> 'LyricsResponse':
        """
        Build from the lyrics API JSON, ignoring unknown keys

        Args:
            data: Decoded JSON object

        Returns:
            LyricsResponse instance
        """
        return cls(
            error=bool(data.get('error', False)),
            sync_type=data.get('syncType'),
            lines=[SyncedLine.from_api_data(line) for line in data.get('lines') or []]
        )
