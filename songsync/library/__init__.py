"""
Local music library package

Scans a music directory for audio files and reads their tags with mutagen.
"""

from .scanner import get_music_library, reset_music_library, MusicLibrary

__all__ = [
    'get_music_library',
    'reset_music_library',
    'MusicLibrary'
]
