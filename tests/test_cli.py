"""Test the command-line interface"""

import pytest
import yaml
from click.testing import CliRunner
from unittest.mock import Mock, patch

from songsync import __version__
from songsync.exceptions import EmptyQueryException, NoTrackFoundException, TokenError
from songsync.main import cli
from songsync.spotify.models import ResolutionStatus, SongInfo
from songsync.sync import DownloadStats

MATCH = SongInfo(
    song_name="Test Song",
    artist_name="Test Artist, Featured Artist",
    song_link="https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC",
    album_cover_link="https://i.scdn.co/image/large"
)
LYRICS = "[00:12.34]First line\n[00:15.80]Second line"


@pytest.fixture
def runner(config_file):
    """CLI runner with console logging disabled by the test config"""
    return CliRunner()


@pytest.fixture
def spotify():
    with patch('songsync.main.get_spotify_client') as get_client:
        get_client.return_value.get_song_info.return_value = MATCH
        yield get_client.return_value


@pytest.fixture
def lyrics_provider():
    with patch('songsync.main.get_synced_lyrics_provider') as get_provider:
        get_provider.return_value.get_synced_lyrics.return_value = LYRICS
        yield get_provider.return_value


class TestGlobalOptions:
    """Test the root command"""

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_stops_before_subcommand(self, runner, spotify):
        result = runner.invoke(cli, ['--version', 'search', 'Test Song'])

        assert result.exit_code == 0
        assert __version__ in result.output
        spotify.get_song_info.assert_not_called()

    def test_no_command_shows_help(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "download-all" in result.output


class TestSearchCommand:
    """Test `songsync search`"""

    def test_search(self, runner, spotify):
        result = runner.invoke(cli, ['search', 'Test Song', 'Test Artist', '--offset', '1'])

        assert result.exit_code == 0
        assert "Test Artist, Featured Artist" in result.output
        assert MATCH.song_link in result.output
        spotify.get_song_info.assert_called_once_with(SongInfo("Test Song", "Test Artist"), offset=1)

    def test_search_not_found(self, runner, spotify):
        spotify.get_song_info.side_effect = NoTrackFoundException()

        result = runner.invoke(cli, ['search', 'Nothing'])

        assert result.exit_code == 1
        assert "No track found" in result.output

    def test_search_empty(self, runner, spotify):
        spotify.get_song_info.side_effect = EmptyQueryException()

        result = runner.invoke(cli, ['search'])

        assert result.exit_code == 1
        assert "Nothing to search for" in result.output

    def test_search_error(self, runner, spotify):
        spotify.get_song_info.side_effect = TokenError("Token endpoint returned HTTP 403")

        result = runner.invoke(cli, ['search', 'Test Song'])

        assert result.exit_code == 1
        assert "HTTP 403" in result.output

    def test_negative_offset_rejected(self, runner, spotify):
        result = runner.invoke(cli, ['search', 'Test Song', '--offset', '-1'])
        assert result.exit_code == 2


class TestLyricsCommand:
    """Test `songsync lyrics`"""

    def test_print(self, runner, spotify, lyrics_provider):
        result = runner.invoke(cli, ['lyrics', 'Test Song', 'Test Artist'])

        assert result.exit_code == 0
        assert LYRICS in result.output
        lyrics_provider.get_synced_lyrics.assert_called_once_with(MATCH.song_link)

    def test_save(self, runner, spotify, lyrics_provider, temp_dir):
        audio = temp_dir / "song.mp3"
        audio.touch()

        result = runner.invoke(cli, ['lyrics', 'Test Song', '--save', str(audio)])

        assert result.exit_code == 0
        assert (temp_dir / "song.lrc").read_text(encoding='utf-8') == LYRICS

    def test_match_without_link(self, runner, spotify, lyrics_provider):
        spotify.get_song_info.return_value = SongInfo("Test Song", "Test Artist", None, None)

        result = runner.invoke(cli, ['lyrics', 'Test Song'])

        assert result.exit_code == 1
        assert "no Spotify link" in result.output
        lyrics_provider.get_synced_lyrics.assert_not_called()

    def test_no_lyrics(self, runner, spotify, lyrics_provider):
        lyrics_provider.get_synced_lyrics.return_value = None

        result = runner.invoke(cli, ['lyrics', 'Test Song'])

        assert result.exit_code == 1
        assert "No synced lyrics" in result.output


class TestLibraryCommands:
    """Test `songsync list` and `songsync download-all`"""

    def test_list(self, runner, settings):
        music = settings.get_music_directory()
        (music / "song.mp3").touch()

        with patch('songsync.library.scanner.mutagen.File') as mock_file:
            mock_file.return_value.tags = {'title': ['My Song'], 'artist': ['My Artist']}
            result = runner.invoke(cli, ['list'])

        assert result.exit_code == 0
        assert "My Song" in result.output
        assert "1 songs" in result.output

    def test_list_empty(self, runner, settings):
        result = runner.invoke(cli, ['list'])
        assert result.exit_code == 0
        assert "No songs found" in result.output

    def test_list_missing_directory(self, runner, temp_dir):
        result = runner.invoke(cli, ['list', '--directory', str(temp_dir / "nope")])
        assert result.exit_code == 1
        assert "Music directory not found" in result.output

    def test_download_all(self, runner, settings):
        (settings.get_music_directory() / "song.mp3").touch()
        stats = DownloadStats(total_songs=1, counts={ResolutionStatus.DOWNLOADED: 1})

        with patch('songsync.library.scanner.mutagen.File', return_value=None), \
                patch('songsync.main.LyricsDownloader') as downloader_cls:
            downloader_cls.return_value.download_all.return_value = stats
            result = runner.invoke(cli, ['download-all', '--force'])

        assert result.exit_code == 0
        assert "Downloaded: 1" in result.output
        songs = downloader_cls.return_value.download_all.call_args.args[0]
        assert [song.file_path.name for song in songs] == ["song.mp3"]
        assert downloader_cls.return_value.download_all.call_args.kwargs['skip_existing'] is False


class TestTokenCommand:
    """Test `songsync token`"""

    def test_token(self, runner):
        provider = Mock()
        provider.name = "web_player"
        provider.get_token.return_value = "BQD" + "x" * 100
        provider.token_age = 0.2
        provider.lifetime = 1800

        with patch('songsync.main.create_token_provider', return_value=provider) as create:
            result = runner.invoke(cli, ['token', '--strategy', 'web_player'])

        assert result.exit_code == 0
        assert "web_player" in result.output
        assert "30m 00s" in result.output
        create.assert_called_once_with(strategy='web_player')

    def test_invalid_strategy(self, runner):
        result = runner.invoke(cli, ['token', '--strategy', 'oauth'])
        assert result.exit_code == 2


class TestConfigCommands:
    """Test `songsync config`"""

    def test_show(self, runner):
        result = runner.invoke(cli, ['config', 'show'])

        assert result.exit_code == 0
        assert "Token strategy: web_player" in result.output
        assert "Client ID: set" in result.output

    def test_set(self, runner, config_file, settings):
        result = runner.invoke(cli, ['config', 'set', '--strategy', 'client_credentials', '--overwrite'])

        assert result.exit_code == 0
        assert settings.spotify.token_strategy == "client_credentials"

        saved = yaml.safe_load(config_file.read_text())
        assert saved['spotify']['token_strategy'] == "client_credentials"
        assert saved['lyrics']['overwrite_existing'] is True
        assert saved['spotify']['client_secret'] == ""

    def test_set_nothing(self, runner):
        result = runner.invoke(cli, ['config', 'set'])
        assert "No changes specified" in result.output
