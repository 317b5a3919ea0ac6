"""
Configuration package for SongSync

Two components:

1. Settings (settings.py): YAML files, environment variables and defaults
   merged into dataclass sections.
2. Authentication (auth.py): access token strategies for the Spotify Web
   API with a 30 minute in-memory cache.

Usage:

    from songsync.config import get_settings, get_auth

    settings = get_settings()
    token = get_auth().get_token()
"""

from .settings import get_settings, reload_settings, Settings

from .auth import (
    get_auth,
    reset_auth,
    create_token_provider,
    TokenProvider,
    ClientCredentialsTokenProvider,
    WebPlayerTokenProvider
)

__all__ = [
    # Settings management
    'get_settings',
    'reload_settings',
    'Settings',

    # Token acquisition
    'get_auth',
    'reset_auth',
    'create_token_provider',
    'TokenProvider',
    'ClientCredentialsTokenProvider',
    'WebPlayerTokenProvider'
]
