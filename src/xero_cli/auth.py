"""OAuth2 authentication for the Xero API.

Handles the authorization-code and refresh-token grants, token persistence
and expiry tracking.
"""

from __future__ import annotations

import base64
import logging
import secrets
from datetime import datetime
from typing import Callable
from urllib.parse import urlencode

import httpx

from xero_cli.config import Config
from xero_cli.credentials import CredentialStore, is_token_valid, now_ms
from xero_cli.models.auth import TokenGrantResult, TokenResponse, TokenStatus
from xero_cli.utils.errors import AuthError, ConfigError, TokenExchangeError, TokenRefreshError

logger = logging.getLogger(__name__)


def generate_state() -> str:
    """Random anti-CSRF token for the authorization request."""
    return secrets.token_urlsafe(16)


def build_authorization_url(
    authorize_url: str,
    client_id: str,
    redirect_uri: str,
    scopes: str,
    state: str,
) -> str:
    """Browser-facing URL that starts the authorization-code flow."""
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": scopes,
        "state": state,
    }
    return f"{authorize_url}?{urlencode(params)}"


def basic_auth_header(client_id: str, client_secret: str) -> str:
    credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
    return f"Basic {credentials}"


def _upstream_message(response: httpx.Response) -> str:
    """The identity endpoint's error_description, else the raw failure text."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        if data.get("error_description"):
            return str(data["error_description"])
        if data.get("error"):
            return str(data["error"])
    return response.text or f"HTTP {response.status_code}"


class AuthManager:
    """Obtains, refreshes and persists OAuth2 tokens for the Xero API."""

    def __init__(
        self,
        config: Config,
        store: CredentialStore,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._config = config
        self._store = store
        self._clock = clock
        self._http = httpx.Client(timeout=config.settings.timeout)

    @property
    def store(self) -> CredentialStore:
        return self._store

    def get_access_token(self, force_refresh: bool = False) -> str:
        """Get a valid access token, refreshing at most once if needed."""
        creds = self._store.load()
        if not force_refresh and is_token_valid(creds.access_token, creds.token_expiry, self._clock()):
            return creds.access_token

        logger.info("Access token missing or stale, refreshing")
        return self.refresh_access_token().access_token

    def get_status(self) -> TokenStatus:
        """Get the current token status."""
        creds = self._store.load()
        if not creds.access_token:
            return TokenStatus(has_token=False, is_valid=False, has_refresh_token=bool(creds.refresh_token))

        now = self._clock()
        seconds_remaining = None
        if creds.token_expiry > now:
            seconds_remaining = (creds.token_expiry - now) // 1000

        return TokenStatus(
            has_token=True,
            is_valid=is_token_valid(creds.access_token, creds.token_expiry, now),
            has_refresh_token=bool(creds.refresh_token),
            expires_at=datetime.fromtimestamp(creds.token_expiry / 1000) if creds.token_expiry else None,
            seconds_remaining=seconds_remaining,
        )

    def exchange_authorization_code(self, code: str, redirect_uri: str) -> TokenGrantResult:
        """Exchange an authorization code for tokens and store them.

        Raises:
            ConfigError: Client id or secret not configured.
            TokenExchangeError: The identity endpoint rejected the exchange.
        """
        creds = self._store.load()
        if not creds.client_id or not creds.client_secret:
            raise ConfigError(
                "Client ID and secret not configured. "
                "Run: xero config set --client-id <id> --client-secret <secret>"
            )

        try:
            token = self._post_grant(
                creds.client_id,
                creds.client_secret,
                {"grant_type": "authorization_code", "code": code, "redirect_uri": redirect_uri},
            )
        except (httpx.HTTPError, ValueError, _GrantRejected) as e:
            raise TokenExchangeError(f"Token exchange failed: {e}") from e

        result = self._to_result(token)
        self._store.update(
            access_token=result.access_token,
            refresh_token=result.refresh_token or "",
            token_expiry=result.token_expiry,
        )
        logger.info("Authorization code exchanged for tokens")
        return result

    def refresh_access_token(self) -> TokenGrantResult:
        """Run the refresh-token grant and store the new tokens.

        The stored refresh token is kept when the response does not rotate it.

        Raises:
            AuthError: No refresh token stored.
            ConfigError: Client id or secret not configured.
            TokenRefreshError: The identity endpoint rejected the refresh.
        """
        creds = self._store.load()
        if not creds.refresh_token:
            raise AuthError("No refresh token available. Please run: xero auth login")
        if not creds.client_id or not creds.client_secret:
            raise ConfigError(
                "Client ID and secret not configured. "
                "Run: xero config set --client-id <id> --client-secret <secret>"
            )

        try:
            token = self._post_grant(
                creds.client_id,
                creds.client_secret,
                {"grant_type": "refresh_token", "refresh_token": creds.refresh_token},
            )
        except (httpx.HTTPError, ValueError, _GrantRejected) as e:
            raise TokenRefreshError(f"Token refresh failed: {e}") from e

        result = self._to_result(token)
        fields: dict[str, object] = {
            "access_token": result.access_token,
            "token_expiry": result.token_expiry,
        }
        if result.refresh_token:
            fields["refresh_token"] = result.refresh_token
        self._store.update(**fields)
        logger.info("Access token refreshed")
        return result

    def _post_grant(self, client_id: str, client_secret: str, data: dict[str, str]) -> TokenResponse:
        response = self._http.post(
            self._config.endpoints.token_url,
            data=data,
            headers={
                "Authorization": basic_auth_header(client_id, client_secret),
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
        )
        if response.status_code != 200:
            raise _GrantRejected(_upstream_message(response))
        return TokenResponse.model_validate(response.json())

    def _to_result(self, token: TokenResponse) -> TokenGrantResult:
        return TokenGrantResult(
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            expires_in_seconds=token.expires_in,
            token_expiry=self._clock() + token.expires_in * 1000,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()


class _GrantRejected(Exception):
    """Non-200 answer from the token endpoint, carrying the upstream message."""
