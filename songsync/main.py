"""
Main CLI interface for SongSync

This module provides the command-line interface for matching local songs to
Spotify tracks and downloading their time-synced lyrics as .lrc files.

The CLI is built using Click framework and provides:
- Track operations (search, lyrics)
- Library operations (list, download-all)
- Token diagnostics (token)
- Configuration management (config show, config set)
"""

import sys
import click
import functools
from pathlib import Path

from . import __version__
from .config.settings import TOKEN_STRATEGIES, get_settings, reload_settings
from .config.auth import create_token_provider
from .exceptions import EmptyQueryException, NoTrackFoundException
from .library.scanner import MusicLibrary
from .lyrics.lrc import save_lrc
from .lyrics.synced import get_synced_lyrics_provider
from .spotify.client import get_spotify_client
from .spotify.models import ResolutionStatus, SongInfo
from .sync.downloader import LyricsDownloader
from .utils.helpers import format_age, truncate_string
from .utils.logger import configure_from_settings, get_logger, get_current_log_file


logger = get_logger(__name__)


def print_banner():
    """Print application banner to console"""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                           SongSync                            ║
║                                                               ║
║       Synced lyrics for your local music, via Spotify         ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝
    """
    click.echo(click.style(banner, fg='green', bold=True))


def handle_error(func):
    """
    Decorator to handle common CLI errors gracefully

    Catches exceptions raised by a command, logs them and exits with a
    non-zero status instead of printing a traceback.

    Args:
        func: The CLI command function to wrap

    Returns:
        Wrapped function with error handling
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)  # Standard exit code for SIGINT
        except Exception as e:
            logger.debug(f"Command failed: {e}", exc_info=True)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def print_song_info(info: SongInfo):
    click.echo(f"Track:   {info.song_name}")
    click.echo(f"Artists: {info.artist_name}")
    click.echo(f"Link:    {info.song_link}")
    click.echo(f"Cover:   {info.album_cover_link or '-'}")


def find_song_info(title: str, artist: str, offset: int) -> SongInfo:
    """Search Spotify, turning the expected misses into friendly exits"""
    query = SongInfo(song_name=title, artist_name=artist)
    try:
        return get_spotify_client().get_song_info(query, offset=offset)
    except EmptyQueryException:
        click.echo(click.style("Nothing to search for: title and artist are empty", fg='yellow'))
        sys.exit(1)
    except NoTrackFoundException:
        click.echo(click.style(f"No track found for '{query.search_text.strip()}'", fg='yellow'))
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    SongSync - Download time-synced lyrics for local songs

    Matches songs by title and artist against the Spotify catalog and saves
    their synced lyrics as .lrc files next to the audio.
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"SongSync v{__version__}")
        ctx.exit()

    if config:
        reload_settings(config)

    configure_from_settings(verbose=verbose)
    ctx.obj['verbose'] = verbose

    if config:
        logger.console_info(f"Loaded config: {config}")

    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


@cli.command()
@click.argument('title', required=False, default='')
@click.argument('artist', required=False, default='')
@click.option('--offset', type=click.IntRange(min=0), default=0, help='Use the n-th search result instead of the first')
@handle_error
def search(title, artist, offset):
    """Find the Spotify track for TITLE and ARTIST"""
    info = find_song_info(title, artist, offset)
    print_song_info(info)


@cli.command()
@click.argument('title', required=False, default='')
@click.argument('artist', required=False, default='')
@click.option('--offset', type=click.IntRange(min=0), default=0, help='Use the n-th search result instead of the first')
@click.option('--save', 'audio_file', type=click.Path(exists=True, dir_okay=False),
              help='Write the lyrics as .lrc next to this audio file')
@handle_error
def lyrics(title, artist, offset, audio_file):
    """
    Fetch synced lyrics for TITLE and ARTIST

    Prints the lyrics in LRC format, or saves them beside AUDIO_FILE when
    --save is given.
    """
    info = find_song_info(title, artist, offset)
    click.echo(f"Matched: {info.artist_name} - {info.song_name}")

    if not info.song_link:
        click.echo(click.style("Matched track has no Spotify link, cannot fetch lyrics", fg='yellow'))
        sys.exit(1)

    text = get_synced_lyrics_provider().get_synced_lyrics(info.song_link)
    if text is None:
        click.echo(click.style("No synced lyrics available for this track", fg='yellow'))
        sys.exit(1)

    if audio_file:
        settings = get_settings()
        lrc_path = save_lrc(text, audio_file, overwrite=settings.lyrics.overwrite_existing)
        click.echo(click.style(f"Saved {lrc_path}", fg='green'))
    else:
        click.echo()
        click.echo(text)


@cli.command(name='list')
@click.option('--query', '-q', default='', help='Only songs whose title or artist contains this text')
@click.option('--directory', '-d', type=click.Path(file_okay=False), help='Music directory to scan')
@handle_error
def list_songs(query, directory):
    """List songs in the local music library"""
    library = MusicLibrary(directory=Path(directory) if directory else None)
    songs = library.filter_songs(query)

    if not songs:
        click.echo(f"No songs found in {library.directory}")
        return

    click.echo(f"Songs in {library.directory}:\n")
    for song in songs:
        marker = click.style("lrc", fg='green') if song.file_path.with_suffix('.lrc').exists() else "   "
        title = truncate_string(song.display_title, 40)
        click.echo(f"  {marker}  {title:<40}  {song.display_artist}")

    click.echo(f"\n{len(songs)} songs")


@cli.command(name='download-all')
@click.option('--directory', '-d', type=click.Path(file_okay=False), help='Music directory to scan')
@click.option('--force', is_flag=True, help='Also fetch lyrics for songs that already have an .lrc file')
@handle_error
def download_all(directory, force):
    """Fetch synced lyrics for every song in the library"""
    library = MusicLibrary(directory=Path(directory) if directory else None)
    songs = library.get_all_songs()

    if not songs:
        click.echo(f"No songs found in {library.directory}")
        return

    downloader = LyricsDownloader()
    stats = downloader.download_all(songs, skip_existing=not force)

    click.echo()
    click.echo(click.style("Lyrics download completed", fg='green', bold=True))
    click.echo(f"   Downloaded: {stats.downloaded}")
    click.echo(f"   No lyrics: {stats.count(ResolutionStatus.NO_LYRICS)}")
    click.echo(f"   Not found: {stats.count(ResolutionStatus.NOT_FOUND)}")
    click.echo(f"   Untagged: {stats.count(ResolutionStatus.EMPTY_QUERY)}")
    click.echo(f"   Skipped: {stats.count(ResolutionStatus.SKIPPED)}")
    click.echo(f"   Failed: {stats.count(ResolutionStatus.FAILED)}")
    if stats.duration is not None:
        click.echo(f"   Time: {stats.duration:.1f}s")

    failed = stats.failed_results()
    if failed:
        click.echo("\nNot matched:")
        for result in failed[:10]:
            click.echo(f"   • {result.song.file_path.name}: {result.error_message}")
        if len(failed) > 10:
            click.echo(f"   ... and {len(failed) - 10} more")


@cli.command()
@click.option('--strategy', type=click.Choice(TOKEN_STRATEGIES), help='Token strategy to test')
@handle_error
def token(strategy):
    """Fetch an access token and show how it was obtained"""
    provider = create_token_provider(strategy=strategy)
    access_token = provider.get_token()

    click.echo(f"Strategy: {provider.name}")
    click.echo(f"Token:    {truncate_string(access_token, 24)}")
    click.echo(f"Age:      {format_age(provider.token_age)}")
    click.echo(f"Refresh:  after {format_age(provider.lifetime)}")


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command()
@handle_error
def show():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:\n")

    click.echo("Spotify:")
    click.echo(f"   Token strategy: {settings.spotify.token_strategy}")
    click.echo(f"   Client ID: {'set' if settings.spotify.client_id else 'not set'}")
    click.echo(f"   Token lifetime: {settings.spotify.token_lifetime}s")

    click.echo("\nLyrics:")
    click.echo(f"   API: {settings.lyrics.api_url}")
    click.echo(f"   Format: {settings.lyrics.format}")
    click.echo(f"   Overwrite existing: {settings.lyrics.overwrite_existing}")

    click.echo("\nLibrary:")
    click.echo(f"   Music directory: {settings.get_music_directory()}")
    click.echo(f"   Extensions: {', '.join(settings.library.extensions)}")
    click.echo(f"   Recursive: {settings.library.recursive}")

    current_log = get_current_log_file()
    click.echo("\nLogging:")
    click.echo(f"   Level: {settings.logging.level}")
    click.echo(f"   File: {current_log or 'console only'}")

    is_valid, errors = settings.validate()
    if not is_valid:
        click.echo(click.style("\nConfiguration problems:", fg='yellow'))
        for error in errors:
            click.echo(f"   • {error}")


@config.command(name='set')
@click.option('--strategy', type=click.Choice(TOKEN_STRATEGIES), help='Set token strategy')
@click.option('--music-dir', type=click.Path(file_okay=False), help='Set music directory')
@click.option('--lyrics-api', help='Set lyrics API URL')
@click.option('--overwrite/--no-overwrite', default=None, help='Replace existing .lrc files without backup')
@handle_error
def set_config(strategy, music_dir, lyrics_api, overwrite):
    """Update configuration settings"""
    settings = get_settings()
    changes = []

    if strategy:
        settings.spotify.token_strategy = strategy
        changes.append(f"Token strategy: {strategy}")

    if music_dir:
        settings.library.music_directory = music_dir
        changes.append(f"Music directory: {music_dir}")

    if lyrics_api:
        settings.lyrics.api_url = lyrics_api
        changes.append(f"Lyrics API: {lyrics_api}")

    if overwrite is not None:
        settings.lyrics.overwrite_existing = overwrite
        changes.append(f"Overwrite existing: {overwrite}")

    if changes:
        target = settings.save_config(settings.config_path)
        click.echo(f"Configuration updated ({target}):")
        for change in changes:
            click.echo(f"   • {change}")
    else:
        click.echo("No changes specified")


if __name__ == '__main__':
    cli()
