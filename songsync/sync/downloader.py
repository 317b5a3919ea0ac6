"""
Song resolution workflow: local song -> Spotify track -> synced lyrics -> .lrc

For one song the workflow is three outbound calls in sequence:

1. Token: reused from the shared provider unless older than 30 minutes
2. Search: the song's "title artist" against the catalog, first result only
3. Lyrics: the matched track's link against the lyrics API

LyricsDownloader.resolve() performs the calls and reports the outcome as a
ResolutionResult without raising for the expected "no match" cases.
download() additionally writes the .lrc file, and download_all() runs the
workflow for a list of songs with a progress bar, continuing past failures.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tqdm import tqdm

from ..config.settings import Settings, get_settings
from ..exceptions import (
    EmptyQueryException,
    NoTrackFoundException,
    SongSyncError
)
from ..lyrics.lrc import save_lrc
from ..lyrics.synced import SyncedLyricsProvider, get_synced_lyrics_provider
from ..spotify.client import SpotifyClient, get_spotify_client
from ..spotify.models import ResolutionStatus, Song, SongInfo
from ..utils.helpers import lrc_path_for
from ..utils.logger import get_logger


@dataclass
class ResolutionResult:
    """
    Outcome of resolving one song

    Attributes:
        song: The local song that was resolved
        status: What happened
        song_info: Matched Spotify track, when the search succeeded
        lyrics: LRC text, when lyrics were found
        lrc_path: Written .lrc file, when saved
        error_message: Failure description for NOT_FOUND/FAILED/EMPTY_QUERY
    """
    song: Song
    status: ResolutionStatus = ResolutionStatus.PENDING
    song_info: Optional[SongInfo] = None
    lyrics: Optional[str] = None
    lrc_path: Optional[Path] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ResolutionStatus.DOWNLOADED


@dataclass
class DownloadStats:
    """
    Counts per outcome for a batch run

    Attributes:
        total_songs: Songs in the batch
        counts: Number of results per ResolutionStatus
        start_time: When the batch started
        end_time: When the batch finished
    """
    total_songs: int = 0
    counts: Dict[ResolutionStatus, int] = field(default_factory=dict)
    results: List[ResolutionResult] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def record(self, result: ResolutionResult) -> None:
        self.counts[result.status] = self.counts.get(result.status, 0) + 1
        self.results.append(result)

    def count(self, status: ResolutionStatus) -> int:
        return self.counts.get(status, 0)

    @property
    def downloaded(self) -> int:
        return self.count(ResolutionStatus.DOWNLOADED)

    @property
    def success_rate(self) -> float:
        """Downloaded share of the songs that were attempted (skips excluded)"""
        attempted = self.total_songs - self.count(ResolutionStatus.SKIPPED)
        if attempted <= 0:
            return 0.0
        return self.downloaded / attempted

    @property
    def duration(self) -> Optional[float]:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def failed_results(self) -> List[ResolutionResult]:
        return [r for r in self.results
                if r.status in (ResolutionStatus.FAILED, ResolutionStatus.NOT_FOUND)]

    def __str__(self) -> str:
        return (f"Lyrics: {self.downloaded}/{self.total_songs} ({self.success_rate:.1%}), "
                f"No lyrics: {self.count(ResolutionStatus.NO_LYRICS)}, "
                f"Not found: {self.count(ResolutionStatus.NOT_FOUND)}, "
                f"Skipped: {self.count(ResolutionStatus.SKIPPED)}, "
                f"Failed: {self.count(ResolutionStatus.FAILED)}")


class LyricsDownloader:
    """
    Runs the resolution workflow for local songs

    Attributes:
        spotify: Catalog search client
        lyrics_provider: Lyrics API client
        overwrite: Replace existing .lrc files without a backup
    """

    def __init__(
        self,
        spotify: Optional[SpotifyClient] = None,
        lyrics_provider: Optional[SyncedLyricsProvider] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or get_settings()
        self.spotify = spotify or get_spotify_client()
        self.lyrics_provider = lyrics_provider or get_synced_lyrics_provider()
        self.overwrite = self.settings.lyrics.overwrite_existing
        self.logger = get_logger(__name__)

    def resolve(self, song: Song, offset: int = 0) -> ResolutionResult:
        """
        Match a song on Spotify and fetch its synced lyrics

        Args:
            song: Local song (title/artist used as the query)
            offset: Search result offset, to try the next candidate

        Returns:
            ResolutionResult; errors are reported in the result, not raised
        """
        result = ResolutionResult(song=song)

        try:
            result.song_info = self.spotify.get_song_info(song.to_query(), offset=offset)
        except EmptyQueryException as e:
            result.status = ResolutionStatus.EMPTY_QUERY
            result.error_message = e.message
            return result
        except NoTrackFoundException as e:
            result.status = ResolutionStatus.NOT_FOUND
            result.error_message = e.message
            return result
        except SongSyncError as e:
            self.logger.error(f"Search failed for {song.file_path.name}: {e}")
            result.status = ResolutionStatus.FAILED
            result.error_message = e.message
            return result

        if not result.song_info.song_link:
            result.status = ResolutionStatus.NO_LYRICS
            result.error_message = "Matched track has no Spotify link"
            return result

        try:
            lyrics = self.lyrics_provider.get_synced_lyrics(result.song_info.song_link)
        except SongSyncError as e:
            self.logger.error(f"Lyrics fetch failed for {song.file_path.name}: {e}")
            result.status = ResolutionStatus.FAILED
            result.error_message = e.message
            return result

        if lyrics is None:
            result.status = ResolutionStatus.NO_LYRICS
            return result

        result.lyrics = lyrics
        result.status = ResolutionStatus.DOWNLOADED
        return result

    def download(self, song: Song, offset: int = 0) -> ResolutionResult:
        """
        Resolve a song and write its lyrics next to the audio file

        Args:
            song: Local song
            offset: Search result offset

        Returns:
            ResolutionResult with lrc_path set on success
        """
        result = self.resolve(song, offset=offset)
        if not result.success:
            return result

        try:
            result.lrc_path = save_lrc(result.lyrics, song.file_path, overwrite=self.overwrite)
        except SongSyncError as e:
            self.logger.error(str(e))
            result.status = ResolutionStatus.FAILED
            result.error_message = e.message
        return result

    def download_all(
        self,
        songs: Iterable[Song],
        skip_existing: bool = True,
        show_progress: bool = True
    ) -> DownloadStats:
        """
        Fetch lyrics for many songs, one after another

        Args:
            songs: Songs to process
            skip_existing: Leave songs that already have an .lrc file alone
            show_progress: Draw a tqdm progress bar

        Returns:
            DownloadStats with one result per song
        """
        songs = list(songs)
        stats = DownloadStats(total_songs=len(songs), start_time=datetime.now())
        self.logger.info(f"Fetching lyrics for {len(songs)} songs")

        with tqdm(total=len(songs), desc="Fetching lyrics", unit="song",
                  disable=not show_progress, colour='cyan') as progress:
            for song in songs:
                progress.set_postfix_str(song.display_title[:30])

                if skip_existing and lrc_path_for(song.file_path).exists():
                    result = ResolutionResult(song=song, status=ResolutionStatus.SKIPPED)
                else:
                    try:
                        result = self.download(song)
                    except Exception as e:
                        self.logger.error(f"Unexpected error for {song.file_path.name}: {e}")
                        result = ResolutionResult(
                            song=song,
                            status=ResolutionStatus.FAILED,
                            error_message=str(e)
                        )

                self.logger.debug(f"{song.file_path.name}: {result.status.value}")
                stats.record(result)
                progress.update(1)

        stats.end_time = datetime.now()
        self.logger.info(f"Batch finished: {stats}")
        return stats
