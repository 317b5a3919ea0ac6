"""
SongSync: match local music files against Spotify and fetch synced lyrics

SongSync scans a local music directory, finds the Spotify track that
corresponds to each file's title and artist, and downloads time-synced
lyrics for it from a Spotify lyrics API. Lyrics are written next to the
audio file as an .lrc file so any LRC-aware player can display them.

## Package layout

**Configuration (`songsync/config/`)**
- YAML + environment variable settings
- Access token acquisition with two interchangeable strategies
  (client credentials and web player), cached for 30 minutes

**Spotify (`songsync/spotify/`)**
- Catalog search returning the first matching track
- Data models for tracks, albums, artists and resolved songs

**Lyrics (`songsync/lyrics/`)**
- Synced lyrics retrieval and LRC formatting
- Writing .lrc files beside audio files

**Library (`songsync/library/`)**
- Local music directory scan with tag reading, cached per session

**Sync (`songsync/sync/`)**
- The resolution workflow: search, fetch lyrics, save, for one or all songs

**Utilities (`songsync/utils/`)**
- Logging setup with colored console output and rotating file logs
- Retry and filesystem helpers

## Quick start
```bash
pip install -e .

# Look up a track
songsync search "Bohemian Rhapsody" "Queen"

# Print its synced lyrics
songsync lyrics "Bohemian Rhapsody" "Queen"

# Fetch lyrics for a whole directory
songsync download-all --directory ~/Music
```
"""

# Version information for the SongSync package
__version__ = "1.1.0"

__author__ = "SongSync Team"

__description__ = "Match local music against Spotify and download synced LRC lyrics"

__all__ = [
    "__version__",
    "__author__",
    "__description__"
]
