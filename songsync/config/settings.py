"""
Configuration management for SongSync

This module handles loading, validation, and management of application settings
from multiple sources including YAML files and environment variables.

The configuration is organized into logical sections using dataclasses:
- Spotify settings (credentials, token strategy, endpoints)
- Lyrics API settings (endpoint, output format)
- Local library settings (music directory, file extensions)
- Logging and network options

Credentials can be loaded from environment variables (or a .env file) so
they never have to be stored in a YAML file.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field, asdict
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


TOKEN_STRATEGIES = ("client_credentials", "web_player")
LYRICS_FORMATS = ("lrc",)


@dataclass
class SpotifyConfig:
    """
    Spotify API configuration and token settings

    The client_credentials strategy needs client_id and client_secret from a
    registered Spotify application. The web_player strategy needs no
    credentials and borrows the anonymous token the Spotify web player uses.
    """
    client_id: str = ""
    client_secret: str = ""
    token_strategy: str = "web_player"  # client_credentials, web_player
    token_url: str = "https://accounts.spotify.com/api/token"
    web_player_token_url: str = "https://open.spotify.com/get_access_token"
    api_base_url: str = "https://api.spotify.com/v1/"
    token_lifetime: int = 1800  # 30 minutes


@dataclass
class LyricsConfig:
    """
    Lyrics API configuration

    The lyrics API takes a Spotify track URL and returns time-synced lines.
    """
    api_url: str = "https://spotify-lyric-api.herokuapp.com/"
    format: str = "lrc"
    overwrite_existing: bool = False
    timeout: int = 30


@dataclass
class LibraryConfig:
    """Local music library location and which files count as songs"""
    music_directory: str = "~/Music"
    extensions: List[str] = field(
        default_factory=lambda: [".mp3", ".flac", ".m4a", ".ogg", ".opus", ".wav"]
    )
    recursive: bool = True


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls log levels, optional file output with rotation, and console
    formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


@dataclass
class NetworkConfig:
    """
    Network and HTTP configuration settings

    The user agent is sent to the web player token endpoint, which rejects
    requests that do not look like a desktop browser.
    """
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
    )
    request_timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 1.0


class Settings:
    """
    Main settings class that manages all configuration

    Loads defaults, then the first YAML file found, then environment
    variables, and exposes each section as an attribute.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".songsync"

        self.spotify = SpotifyConfig()
        self.lyrics = LyricsConfig()
        self.library = LibraryConfig()
        self.logging = LoggingConfig()
        self.network = NetworkConfig()

        # Load configuration from various sources in order of precedence
        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'spotify': self.spotify,
            'lyrics': self.lyrics,
            'library': self.library,
            'logging': self.logging,
            'network': self.network,
        }

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in multiple locations in order of
        precedence. The first file found will be used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only attributes that exist on the target dataclass are updated, so
        unknown keys in the YAML file are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load sensitive configuration from environment variables

        Environment variables take precedence over file-based configuration.
        """
        env_mappings = {
            'SPOTIFY_CLIENT_ID': lambda v: setattr(self.spotify, 'client_id', v),
            'SPOTIFY_CLIENT_SECRET': lambda v: setattr(self.spotify, 'client_secret', v),
            'SONGSYNC_TOKEN_STRATEGY': lambda v: setattr(self.spotify, 'token_strategy', v),
            'SONGSYNC_MUSIC_DIR': lambda v: setattr(self.library, 'music_directory', v),
            'SONGSYNC_LYRICS_API_URL': lambda v: setattr(self.lyrics, 'api_url', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_music_directory(self) -> Path:
        """Return the music directory with ~ expanded"""
        return Path(self.library.music_directory).expanduser()

    def get_config_directory(self) -> Path:
        """Return the configuration directory"""
        return self.config_dir

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        Credentials are blanked before writing so the file can be shared.

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to
        """
        if not path:
            target = self.get_config_directory() / "config.yaml"
        else:
            target = Path(path)

        config_data = {name: asdict(section) for name, section in self._sections().items()}

        # Remove sensitive data from saved config
        config_data['spotify']['client_id'] = ""
        config_data['spotify']['client_secret'] = ""

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)
        return target

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate current configuration

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if self.spotify.token_strategy not in TOKEN_STRATEGIES:
            errors.append(f"Invalid token strategy: {self.spotify.token_strategy}")
        elif self.spotify.token_strategy == "client_credentials":
            if not self.spotify.client_id or not self.spotify.client_secret:
                errors.append("Spotify client_id and client_secret are required for client_credentials")

        if self.spotify.token_lifetime <= 0:
            errors.append(f"Token lifetime must be positive: {self.spotify.token_lifetime}")

        if self.lyrics.format not in LYRICS_FORMATS:
            errors.append(f"Invalid lyrics format: {self.lyrics.format}")

        return (not errors, errors)

    def __str__(self) -> str:
        sections = [
            f"Token: {self.spotify.token_strategy}",
            f"Library: {self.library.music_directory}",
            f"Lyrics: {self.lyrics.api_url}",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance, created on first access
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The shared Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global _settings
    _settings = Settings(config_path)
    return _settings
