"""
Utility helper functions for SongSync
Retry decorator, filename helpers and display formatting
"""

import functools
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Type, Union


# Value media scanners store when a tag is missing
UNKNOWN_TAG = "<unknown>"


def retry_on_failure(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,)
):
    """
    Decorator for retrying functions on failure

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay between attempts
        backoff: Delay multiplier for exponential backoff
        exceptions: Exception types that trigger a retry; anything else propagates immediately
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 1
            current_delay = delay

            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions:
                    if attempt >= max_attempts:
                        raise

                    time.sleep(current_delay)
                    current_delay *= backoff
                    attempt += 1
        return wrapper
    return decorator


def clean_tag(value: Optional[str]) -> Optional[str]:
    """
    Normalize a tag value read from an audio file

    Args:
        value: Raw tag value

    Returns:
        Stripped value, or None when it is empty or the "<unknown>" placeholder
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value or value == UNKNOWN_TAG:
        return None
    return value


def lrc_path_for(audio_path: Union[str, Path]) -> Path:
    """Path of the .lrc file that belongs next to an audio file"""
    return Path(audio_path).with_suffix('.lrc')


def create_backup_filename(original_path: Union[str, Path]) -> Path:
    """
    Create backup filename with timestamp

    Args:
        original_path: Original file path

    Returns:
        Backup file path that does not exist yet; a counter is appended when
        a backup with the same timestamp is already present
    """
    path = Path(original_path)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

    counter = 0
    while True:
        tag = f"backup_{timestamp}" if counter == 0 else f"backup_{timestamp}_{counter}"
        if path.suffix:
            backup_path = path.parent / f"{path.stem}.{tag}{path.suffix}"
        else:
            backup_path = path.parent / f"{path.name}.{tag}"

        if not backup_path.exists():
            return backup_path
        counter += 1


def truncate_string(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate string to maximum length

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: Suffix to add when truncating

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def format_age(seconds: Optional[float]) -> str:
    """Format a token age like "4m 12s" ("never" for None)"""
    if seconds is None:
        return "never"
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"
