"""Test configuration loading"""

import pytest
import yaml

from songsync.config.settings import Settings, get_settings, reload_settings


class TestSettingsDefaults:
    """Test built-in defaults"""

    def test_defaults(self, settings):
        """Test defaults without any config file"""
        assert settings.spotify.token_strategy == "web_player"
        assert settings.spotify.token_lifetime == 1800
        assert settings.lyrics.format == "lrc"
        assert settings.lyrics.overwrite_existing is False
        assert ".mp3" in settings.library.extensions

    def test_defaults_are_valid(self, settings):
        """Web player strategy needs no credentials"""
        is_valid, errors = settings.validate()
        assert is_valid
        assert errors == []


class TestSettingsLoading:
    """Test YAML and environment sources"""

    def test_config_file(self, config_file, settings):
        """Test values from an explicit config file"""
        assert settings.spotify.client_id == "test_id"
        assert settings.network.retry_delay == 0
        assert settings.get_music_directory() == config_file.parent / "music"

    def test_unknown_keys_ignored(self, temp_dir):
        """Test unknown sections and keys do not break loading"""
        path = temp_dir / "config.yaml"
        path.write_text(yaml.dump({
            'spotify': {'token_strategy': 'client_credentials', 'bogus': 1},
            'playlists': {'anything': True}
        }))

        settings = Settings(str(path))
        assert settings.spotify.token_strategy == "client_credentials"
        assert not hasattr(settings.spotify, 'bogus')

    def test_environment_overrides_file(self, config_file, monkeypatch):
        """Environment variables take precedence over the config file"""
        monkeypatch.setenv('SPOTIFY_CLIENT_ID', 'env_id')
        monkeypatch.setenv('SONGSYNC_TOKEN_STRATEGY', 'client_credentials')

        settings = Settings(str(config_file))
        assert settings.spotify.client_id == "env_id"
        assert settings.spotify.client_secret == "test_secret"
        assert settings.spotify.token_strategy == "client_credentials"

    def test_reload_settings_replaces_global(self, config_file):
        """Test reload_settings swaps the global instance"""
        reloaded = reload_settings(str(config_file))
        assert get_settings() is reloaded
        assert reloaded.spotify.client_id == "test_id"


class TestSettingsValidation:
    """Test validate()"""

    def test_unknown_strategy(self, settings):
        settings.spotify.token_strategy = "oauth"
        is_valid, errors = settings.validate()
        assert not is_valid
        assert "Invalid token strategy" in errors[0]

    def test_client_credentials_requires_credentials(self, settings):
        settings.spotify.token_strategy = "client_credentials"
        is_valid, errors = settings.validate()
        assert not is_valid
        assert any("client_id" in error for error in errors)

    @pytest.mark.parametrize("lifetime", [0, -5])
    def test_token_lifetime_positive(self, settings, lifetime):
        settings.spotify.token_lifetime = lifetime
        is_valid, _ = settings.validate()
        assert not is_valid


class TestSettingsSave:
    """Test save_config()"""

    def test_save_blanks_credentials(self, config_file, settings, temp_dir):
        """Credentials must never be written to disk"""
        target = settings.save_config(str(temp_dir / "saved.yaml"))

        data = yaml.safe_load(target.read_text())
        assert data['spotify']['client_id'] == ""
        assert data['spotify']['client_secret'] == ""
        assert data['network']['max_retries'] == 2

        # In-memory credentials are untouched
        assert settings.spotify.client_id == "test_id"

    def test_save_default_location(self, settings):
        target = settings.save_config()
        assert target == settings.get_config_directory() / "config.yaml"
        assert target.exists()
