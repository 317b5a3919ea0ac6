"""
Utilities package for SongSync
Logging setup and small helpers shared by every other package
"""

from .logger import (
    get_logger,
    setup_logging,
    configure_from_settings,
    get_current_log_file,
    parse_size
)

from .helpers import (
    retry_on_failure,
    clean_tag,
    lrc_path_for,
    create_backup_filename,
    truncate_string,
    format_age,
    UNKNOWN_TAG
)

__all__ = [
    # Logger exports
    'get_logger',
    'setup_logging',
    'configure_from_settings',
    'get_current_log_file',
    'parse_size',

    # Helper exports
    'retry_on_failure',
    'clean_tag',
    'lrc_path_for',
    'create_backup_filename',
    'truncate_string',
    'format_age',
    'UNKNOWN_TAG'
]
