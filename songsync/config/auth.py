"""
Access token acquisition for the Spotify Web API

SongSync only needs an anonymous bearer token to search the catalog, so it
never runs the interactive OAuth2 authorization code flow. Two strategies are
supported:

1. Client credentials: POST the application's client id and secret to
   https://accounts.spotify.com/api/token. Requires a registered Spotify
   application.
2. Web player: GET the token the Spotify web player uses from
   https://open.spotify.com/get_access_token. Requires no credentials but a
   browser-like User-Agent.

Both strategies share the caching rule: a single token is kept in memory and
reused until it is older than the configured lifetime (30 minutes by
default). Nothing is written to disk.
"""

import time
from typing import Any, Dict, Optional

import requests

from .settings import Settings, get_settings
from ..exceptions import ConfigError, TokenError
from ..utils.logger import get_logger


class TokenProvider:
    """
    Base class for token strategies with an in-memory, time-based cache

    Subclasses implement _fetch_token() which performs exactly one HTTP
    request and returns the raw access token string.

    Attributes:
        settings: Application settings instance
        lifetime: Seconds a fetched token is trusted before refreshing
        _token: Cached access token ("" when none has been fetched)
        _token_time: time.time() when the cached token was fetched
    """

    name = "base"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger(__name__)
        self.lifetime = self.settings.spotify.token_lifetime
        self.timeout = self.settings.network.request_timeout

        self._token = ""
        self._token_time = 0.0

    @property
    def token_age(self) -> Optional[float]:
        """Seconds since the cached token was fetched, or None without a token"""
        if not self._token:
            return None
        return time.time() - self._token_time

    def is_token_expired(self) -> bool:
        """
        Check whether the cached token must be replaced

        Returns:
            True when no token is cached or it is at least `lifetime` seconds old
        """
        if not self._token:
            return True
        return time.time() - self._token_time >= self.lifetime

    def get_token(self) -> str:
        """
        Return a usable access token, refreshing it only when expired

        Returns:
            Bearer token string

        Raises:
            TokenError: If a refresh was needed and failed
        """
        if self.is_token_expired():
            return self.refresh_token()
        return self._token

    def refresh_token(self) -> str:
        """
        Fetch a new token unconditionally and cache it

        Returns:
            The new bearer token

        Raises:
            TokenError: If the endpoint fails or the response has no token
        """
        self.logger.debug(f"Fetching access token ({self.name})")
        token = self._fetch_token()
        self._token = token
        self._token_time = time.time()
        self.logger.debug("Access token refreshed")
        return token

    def invalidate(self) -> None:
        """Drop the cached token so the next get_token() fetches a new one"""
        self._token = ""
        self._token_time = 0.0

    def _fetch_token(self) -> str:
        raise NotImplementedError

    def _extract(self, response: requests.Response, field_name: str) -> str:
        """
        Pull the token field out of a JSON token response

        Args:
            response: Completed HTTP response
            field_name: Key holding the token in the JSON body

        Returns:
            The token string

        Raises:
            TokenError: On HTTP error status, invalid JSON or missing field
        """
        try:
            response.raise_for_status()
            data: Dict[str, Any] = response.json()
        except requests.HTTPError as e:
            raise TokenError(
                f"Token endpoint returned HTTP {response.status_code}",
                details={'url': response.url, 'original_error': str(e)}
            ) from e
        except ValueError as e:
            raise TokenError(
                "Token endpoint returned invalid JSON",
                details={'url': response.url, 'original_error': str(e)}
            ) from e

        token = data.get(field_name) if isinstance(data, dict) else None
        if not token:
            raise TokenError(
                f"Token response has no '{field_name}' field",
                details={'url': response.url}
            )
        return token


class ClientCredentialsTokenProvider(TokenProvider):
    """
    Client credentials grant against the Spotify accounts service

    Sends grant_type, client_id and client_secret as a form-encoded body.
    """

    name = "client_credentials"

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        self.client_id = self.settings.spotify.client_id
        self.client_secret = self.settings.spotify.client_secret
        self.token_url = self.settings.spotify.token_url

        if not self.client_id or not self.client_secret:
            raise ConfigError("Spotify client_id and client_secret must be configured")

    def _fetch_token(self) -> str:
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded'
        }
        data = {
            'grant_type': 'client_credentials',
            'client_id': self.client_id,
            'client_secret': self.client_secret
        }

        try:
            response = requests.post(self.token_url, headers=headers, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise TokenError(
                f"Failed to reach Spotify token endpoint: {e}",
                details={'url': self.token_url, 'original_error': str(e)}
            ) from e

        try:
            return self._extract(response, 'access_token')
        finally:
            response.close()


class WebPlayerTokenProvider(TokenProvider):
    """
    Anonymous token issued to the Spotify web player

    The endpoint answers with JSON containing `accessToken`. It only accepts
    requests carrying a desktop browser User-Agent.
    """

    name = "web_player"

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__(settings)
        self.token_url = self.settings.spotify.web_player_token_url
        self.user_agent = self.settings.network.user_agent

    def _fetch_token(self) -> str:
        params = {
            'reason': 'transport',
            'productType': 'web_player'
        }
        headers = {
            'User-Agent': self.user_agent
        }

        try:
            response = requests.get(self.token_url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TokenError(
                f"Failed to reach Spotify web player: {e}",
                details={'url': self.token_url, 'original_error': str(e)}
            ) from e

        try:
            return self._extract(response, 'accessToken')
        finally:
            response.close()


_PROVIDERS = {
    ClientCredentialsTokenProvider.name: ClientCredentialsTokenProvider,
    WebPlayerTokenProvider.name: WebPlayerTokenProvider,
}


def create_token_provider(settings: Optional[Settings] = None, strategy: Optional[str] = None) -> TokenProvider:
    """
    Build the token provider selected by configuration

    Args:
        settings: Settings to use, defaults to the global settings
        strategy: Override for settings.spotify.token_strategy

    Returns:
        A TokenProvider for the chosen strategy

    Raises:
        ConfigError: If the strategy is unknown or lacks credentials
    """
    settings = settings or get_settings()
    strategy = strategy or settings.spotify.token_strategy

    provider_cls = _PROVIDERS.get(strategy)
    if provider_cls is None:
        raise ConfigError(
            f"Unknown token strategy: {strategy}",
            details={'valid': sorted(_PROVIDERS)}
        )
    return provider_cls(settings)


# Global token provider shared by every Spotify client
_auth_instance: Optional[TokenProvider] = None


def get_auth() -> TokenProvider:
    """
    Get the global token provider (singleton pattern)

    Returns:
        Shared TokenProvider built from the current settings
    """
    global _auth_instance
    if not _auth_instance:
        _auth_instance = create_token_provider()
    return _auth_instance


def reset_auth() -> None:
    """Forget the global token provider and its cached token"""
    global _auth_instance
    _auth_instance = None
