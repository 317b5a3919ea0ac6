"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path
from unittest.mock import Mock

import yaml

import songsync.config.settings as settings_module
from songsync.config.auth import reset_auth
from songsync.config.settings import Settings
from songsync.library.scanner import reset_music_library
from songsync.lyrics.synced import reset_synced_lyrics_provider
from songsync.spotify.client import reset_spotify_client


ENV_VARS = [
    'SPOTIFY_CLIENT_ID',
    'SPOTIFY_CLIENT_SECRET',
    'SONGSYNC_TOKEN_STRATEGY',
    'SONGSYNC_MUSIC_DIR',
    'SONGSYNC_LYRICS_API_URL',
]


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def config_file(temp_dir):
    """Config file with fast, offline-friendly settings"""
    music_dir = temp_dir / "music"
    music_dir.mkdir()

    path = temp_dir / "config.yaml"
    path.write_text(yaml.dump({
        'spotify': {
            'client_id': 'test_id',
            'client_secret': 'test_secret',
            'token_strategy': 'web_player',
        },
        'library': {'music_directory': str(music_dir)},
        'logging': {'console_output': False},
        'network': {'max_retries': 2, 'retry_delay': 0},
    }), encoding='utf-8')
    return path


@pytest.fixture(autouse=True)
def settings(monkeypatch, tmp_path, request):
    """
    Isolated global settings

    Environment overrides are cleared and the user config directory points
    into a temporary directory. Tests that need a config file request the
    config_file fixture, which this fixture picks up.
    """
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('HOME', str(tmp_path / "home"))

    config_path = None
    if 'config_file' in request.fixturenames:
        config_path = str(request.getfixturevalue('config_file'))

    test_settings = Settings(config_path)
    monkeypatch.setattr(settings_module, '_settings', test_settings)

    reset_auth()
    reset_spotify_client()
    reset_synced_lyrics_provider()
    reset_music_library()
    yield test_settings
    reset_auth()
    reset_spotify_client()
    reset_synced_lyrics_provider()
    reset_music_library()


@pytest.fixture
def mock_auth():
    """Token provider that always hands out the same token"""
    auth = Mock()
    auth.get_token.return_value = "test_token"
    return auth


@pytest.fixture
def sample_track_data():
    """Sample track object as returned by the search endpoint"""
    return {
        'id': '4uLU6hMCjMI75M1A2tKUQC',
        'name': 'Test Song',
        'artists': [
            {'id': 'artist_123', 'name': 'Test Artist'},
            {'id': 'artist_456', 'name': 'Featured Artist'}
        ],
        'album': {
            'id': 'album_123',
            'name': 'Test Album',
            'album_type': 'album',
            'release_date': '2023-01-01',
            'artists': [{'id': 'artist_123', 'name': 'Test Artist'}],
            'images': [
                {'url': 'https://i.scdn.co/image/large', 'width': 640, 'height': 640},
                {'url': 'https://i.scdn.co/image/small', 'width': 64, 'height': 64}
            ]
        },
        'duration_ms': 210000,  # 3:30
        'explicit': False,
        'popularity': 75,
        'external_urls': {'spotify': 'https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC'},
        'uri': 'spotify:track:4uLU6hMCjMI75M1A2tKUQC'
    }


@pytest.fixture
def sample_search_response(sample_track_data):
    """Search endpoint payload with one track"""
    return {'tracks': {'items': [sample_track_data], 'total': 1}}


@pytest.fixture
def sample_lyrics_data():
    """Lyrics API payload with line-synced lyrics"""
    return {
        'error': False,
        'syncType': 'LINE_SYNCED',
        'lines': [
            {'timeTag': '00:12.34', 'words': 'First line'},
            {'timeTag': '00:15.80', 'words': 'Second line'},
            {'timeTag': '00:20.00', 'words': ''}
        ]
    }


def make_response(status_code=200, json_data=None, url="https://example.test/"):
    """Mock requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.url = url
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response
