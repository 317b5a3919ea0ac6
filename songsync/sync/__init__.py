"""
Resolution workflow package

Ties catalog search, lyrics retrieval and .lrc output together for one
song or a whole library.
"""

from .downloader import LyricsDownloader, ResolutionResult, DownloadStats

__all__ = [
    'LyricsDownloader',
    'ResolutionResult',
    'DownloadStats'
]
