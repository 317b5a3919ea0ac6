"""
Lyrics package for SongSync

- synced.py: lyrics API client returning LRC text
- lrc.py: LRC formatting and .lrc file output
"""

from .synced import (
    get_synced_lyrics_provider,
    reset_synced_lyrics_provider,
    SyncedLyricsProvider
)

from .lrc import format_lrc, save_lrc

__all__ = [
    'get_synced_lyrics_provider',
    'reset_synced_lyrics_provider',
    'SyncedLyricsProvider',
    'format_lrc',
    'save_lrc'
]
