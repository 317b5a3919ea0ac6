"""Test access token acquisition and caching"""

import pytest
import requests
from unittest.mock import patch

from conftest import make_response
from songsync.config.auth import (
    ClientCredentialsTokenProvider,
    WebPlayerTokenProvider,
    create_token_provider,
    get_auth
)
from songsync.exceptions import ConfigError, TokenError


class TestTokenCaching:
    """Test the 30 minute token cache shared by both strategies"""

    @patch('songsync.config.auth.time')
    @patch('songsync.config.auth.requests.get')
    def test_token_reused_within_lifetime(self, mock_get, mock_time, settings):
        """A second call inside 30 minutes makes no request"""
        mock_get.return_value = make_response(json_data={'accessToken': 'token_1'})
        mock_time.time.return_value = 1000.0

        provider = WebPlayerTokenProvider(settings)
        assert provider.get_token() == "token_1"

        mock_time.time.return_value = 1000.0 + 1799
        assert provider.get_token() == "token_1"
        assert mock_get.call_count == 1

    @patch('songsync.config.auth.time')
    @patch('songsync.config.auth.requests.get')
    def test_token_refreshed_at_lifetime(self, mock_get, mock_time, settings):
        """At exactly 30 minutes the token is fetched again"""
        mock_get.side_effect = [
            make_response(json_data={'accessToken': 'token_1'}),
            make_response(json_data={'accessToken': 'token_2'})
        ]
        mock_time.time.return_value = 1000.0

        provider = WebPlayerTokenProvider(settings)
        assert provider.get_token() == "token_1"

        mock_time.time.return_value = 1000.0 + 1800
        assert provider.is_token_expired()
        assert provider.get_token() == "token_2"
        assert mock_get.call_count == 2

    @patch('songsync.config.auth.requests.get')
    def test_first_call_fetches(self, mock_get, settings):
        mock_get.return_value = make_response(json_data={'accessToken': 'abc'})

        provider = WebPlayerTokenProvider(settings)
        assert provider.token_age is None
        assert provider.is_token_expired()
        provider.get_token()
        assert provider.token_age is not None

    @patch('songsync.config.auth.requests.get')
    def test_invalidate_forces_refresh(self, mock_get, settings):
        mock_get.return_value = make_response(json_data={'accessToken': 'abc'})

        provider = WebPlayerTokenProvider(settings)
        provider.get_token()
        provider.invalidate()
        provider.get_token()
        assert mock_get.call_count == 2


class TestWebPlayerTokenProvider:
    """Test the anonymous web player strategy"""

    @patch('songsync.config.auth.requests.get')
    def test_request_shape(self, mock_get, settings):
        """Browser user agent and transport parameters are sent"""
        response = make_response(json_data={'accessToken': 'abc', 'isAnonymous': True})
        mock_get.return_value = response

        WebPlayerTokenProvider(settings).get_token()

        args, kwargs = mock_get.call_args
        assert args[0] == "https://open.spotify.com/get_access_token"
        assert kwargs['params'] == {'reason': 'transport', 'productType': 'web_player'}
        assert kwargs['headers']['User-Agent'] == settings.network.user_agent
        assert kwargs['timeout'] == settings.network.request_timeout
        response.close.assert_called_once()

    @patch('songsync.config.auth.requests.get')
    def test_missing_field(self, mock_get, settings):
        mock_get.return_value = make_response(json_data={'clientId': 'x'})

        with pytest.raises(TokenError, match="accessToken"):
            WebPlayerTokenProvider(settings).get_token()

    @patch('songsync.config.auth.requests.get')
    def test_http_error(self, mock_get, settings):
        response = make_response(status_code=401, json_data={})
        response.raise_for_status.side_effect = requests.HTTPError("401 Client Error")
        mock_get.return_value = response

        with pytest.raises(TokenError, match="HTTP 401"):
            WebPlayerTokenProvider(settings).get_token()
        response.close.assert_called_once()

    @patch('songsync.config.auth.requests.get')
    def test_invalid_json(self, mock_get, settings):
        mock_get.return_value = make_response(json_data=ValueError("Expecting value"))

        with pytest.raises(TokenError, match="invalid JSON"):
            WebPlayerTokenProvider(settings).get_token()

    @patch('songsync.config.auth.requests.get')
    def test_connection_error(self, mock_get, settings):
        mock_get.side_effect = requests.ConnectionError("unreachable")

        provider = WebPlayerTokenProvider(settings)
        with pytest.raises(TokenError):
            provider.get_token()
        assert provider.token_age is None


class TestClientCredentialsTokenProvider:
    """Test the client credentials strategy"""

    @pytest.mark.usefixtures("config_file")
    @patch('songsync.config.auth.requests.post')
    def test_request_shape(self, mock_post, settings):
        """Credentials are posted as a form body"""
        mock_post.return_value = make_response(json_data={
            'access_token': 'cc_token',
            'token_type': 'Bearer',
            'expires_in': 3600
        })

        assert ClientCredentialsTokenProvider(settings).get_token() == "cc_token"

        args, kwargs = mock_post.call_args
        assert args[0] == "https://accounts.spotify.com/api/token"
        assert kwargs['data'] == {
            'grant_type': 'client_credentials',
            'client_id': 'test_id',
            'client_secret': 'test_secret'
        }
        assert kwargs['headers']['Content-Type'] == 'application/x-www-form-urlencoded'

    def test_missing_credentials(self, settings):
        with pytest.raises(ConfigError):
            ClientCredentialsTokenProvider(settings)


class TestProviderFactory:
    """Test strategy selection"""

    def test_default_strategy(self, settings):
        assert isinstance(create_token_provider(settings), WebPlayerTokenProvider)

    @pytest.mark.usefixtures("config_file")
    def test_explicit_strategy(self, settings):
        provider = create_token_provider(settings, strategy="client_credentials")
        assert isinstance(provider, ClientCredentialsTokenProvider)

    def test_unknown_strategy(self, settings):
        with pytest.raises(ConfigError, match="Unknown token strategy"):
            create_token_provider(settings, strategy="oauth")

    def test_get_auth_is_shared(self):
        assert get_auth() is get_auth()
