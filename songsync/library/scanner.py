"""
Local music library scanning

Finds audio files in the configured music directory and reads their title
and artist tags with mutagen. The scan result is cached on the
MusicLibrary instance: the first get_all_songs() walks the directory,
later calls return the same list until refresh() is called.

Tag handling:
- Missing tags, empty tags and the "<unknown>" placeholder become None
- Files mutagen cannot parse are still listed, with both tags None
- Songs are sorted by title (case-insensitive), untitled songs by file name

Cover art is looked up as an image file beside the audio file
(cover.jpg, folder.jpg, ...); embedded artwork is not extracted.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import mutagen
from mutagen import MutagenError
from mutagen.id3 import ID3

from ..config.settings import Settings, get_settings
from ..exceptions import LibraryError
from ..spotify.models import Song
from ..utils.helpers import clean_tag
from ..utils.logger import get_logger


# Containers without an easy interface (WAV, AIFF) expose raw ID3 frames
ID3_FRAMES = {
    'title': 'TIT2',
    'artist': 'TPE1'
}

COVER_FILENAMES = [
    'cover.jpg', 'cover.jpeg', 'cover.png',
    'folder.jpg', 'folder.jpeg', 'folder.png',
    'front.jpg', 'front.png', 'albumart.jpg'
]


class MusicLibrary:
    """
    Session-cached view of the songs in a music directory

    Attributes:
        directory: Root directory that is scanned
        extensions: Lower-case file extensions treated as audio
        recursive: Whether subdirectories are scanned
        filtered_songs: Result of the last filter_songs() call
    """

    def __init__(self, directory: Optional[Path] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__)

        self.directory = Path(directory).expanduser() if directory else self.settings.get_music_directory()
        self.extensions = {ext.lower() if ext.startswith('.') else f".{ext.lower()}"
                           for ext in self.settings.library.extensions}
        self.recursive = self.settings.library.recursive

        self._cached_songs: Optional[List[Song]] = None
        self.filtered_songs: Optional[List[Song]] = None
        self._cover_cache: Dict[Path, Optional[Path]] = {}

    def get_all_songs(self) -> List[Song]:
        """
        Return every song in the library, scanning only on the first call

        Returns:
            Songs sorted by title

        Raises:
            LibraryError: If the directory does not exist
        """
        if self._cached_songs is None:
            self._cached_songs = self._scan()
        return self._cached_songs

    def refresh(self) -> None:
        """Drop the cached scan so the next get_all_songs() rescans"""
        self._cached_songs = None
        self.filtered_songs = None
        self._cover_cache.clear()

    def filter_songs(self, query: str) -> List[Song]:
        """
        Songs whose title or artist contains the query (case-insensitive)

        Args:
            query: Text to look for; blank returns every song

        Returns:
            Matching songs, also stored in filtered_songs
        """
        songs = self.get_all_songs()
        needle = (query or "").strip().lower()

        if not needle:
            self.filtered_songs = list(songs)
        else:
            self.filtered_songs = [
                song for song in songs
                if needle in (song.title or "").lower() or needle in (song.artist or "").lower()
            ]
        return self.filtered_songs

    def _scan(self) -> List[Song]:
        if not self.directory.is_dir():
            raise LibraryError(
                f"Music directory not found: {self.directory}",
                details={'directory': str(self.directory)}
            )

        self.logger.debug(f"Scanning {self.directory} (recursive={self.recursive})")

        songs = []
        for path in self._iter_audio_files():
            title, artist = self._read_tags(path)
            songs.append(Song(
                title=title,
                artist=artist,
                image_path=self._find_cover(path.parent),
                file_path=path
            ))

        songs.sort(key=lambda song: (song.title or song.file_path.stem).lower())
        self.logger.info(f"Found {len(songs)} songs in {self.directory}")
        return songs

    def _iter_audio_files(self) -> Iterator[Path]:
        pattern = '**/*' if self.recursive else '*'
        for path in self.directory.glob(pattern):
            if path.is_file() and path.suffix.lower() in self.extensions:
                yield path.resolve()

    def _read_tags(self, path: Path) -> Tuple[Optional[str], Optional[str]]:
        """
        Read title and artist tags

        Args:
            path: Audio file

        Returns:
            (title, artist), each None when missing or unreadable
        """
        try:
            audio = mutagen.File(path, easy=True)
        except (MutagenError, OSError) as e:
            self.logger.warning(f"Could not read tags from {path.name}: {e}")
            return None, None

        if audio is None or audio.tags is None:
            return None, None

        return clean_tag(self._tag_value(audio.tags, 'title')), clean_tag(self._tag_value(audio.tags, 'artist'))

    @staticmethod
    def _tag_value(tags, key: str) -> Optional[str]:
        if isinstance(tags, ID3):
            frame = tags.get(ID3_FRAMES[key])
            return str(frame.text[0]) if frame is not None and frame.text else None
        values = tags.get(key) or [None]
        return values[0]

    def _find_cover(self, directory: Path) -> Optional[Path]:
        if directory not in self._cover_cache:
            cover = None
            for name in COVER_FILENAMES:
                candidate = directory / name
                if candidate.is_file():
                    cover = candidate
                    break
            self._cover_cache[directory] = cover
        return self._cover_cache[directory]


# Global library instance
_music_library: Optional[MusicLibrary] = None


def get_music_library() -> MusicLibrary:
    """Get the global music library (singleton pattern)"""
    global _music_library
    if not _music_library:
        _music_library = MusicLibrary()
    return _music_library


def reset_music_library() -> None:
    """Forget the global music library and its cached scan"""
    global _music_library
    _music_library = None
