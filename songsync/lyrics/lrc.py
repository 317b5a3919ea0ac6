"""
LRC formatting and .lrc file output

An LRC document here is one line per lyric, each prefixed with its time tag
in square brackets:

    [00:12.34]First line
    [00:15.80]Second line

Lines are joined with a single newline and there is no trailing newline.
"""

from pathlib import Path
from typing import Iterable, Union

from ..exceptions import LyricsError
from ..spotify.models import SyncedLine
from ..utils.helpers import create_backup_filename, lrc_path_for
from ..utils.logger import get_logger


logger = get_logger(__name__)


def format_lrc(lines: Iterable[SyncedLine]) -> str:
    """
    Format synced lines as LRC text

    Args:
        lines: Timed lines in playback order

    Returns:
        "[tag]words" lines joined with "\\n"; "" for no lines
    """
    return "\n".join(line.to_lrc() for line in lines)


def save_lrc(lyrics: str, audio_path: Union[str, Path], overwrite: bool = False) -> Path:
    """
    Write lyrics next to an audio file with the .lrc extension

    An existing .lrc file is renamed to a timestamped backup first unless
    overwrite is set.

    Args:
        lyrics: LRC text
        audio_path: Audio file the lyrics belong to
        overwrite: Replace an existing .lrc file without a backup

    Returns:
        Path of the written .lrc file

    Raises:
        LyricsError: If the file cannot be written
    """
    lrc_path = lrc_path_for(audio_path)

    try:
        if lrc_path.exists() and not overwrite:
            backup_path = create_backup_filename(lrc_path)
            lrc_path.rename(backup_path)
            logger.info(f"Created backup: {backup_path.name}")

        with open(lrc_path, 'w', encoding='utf-8') as f:
            f.write(lyrics)
    except OSError as e:
        raise LyricsError(
            f"Failed to write {lrc_path}: {e}",
            details={'path': str(lrc_path), 'original_error': str(e)}
        ) from e

    logger.info(f"Saved synced lyrics: {lrc_path.name}")
    return lrc_path
