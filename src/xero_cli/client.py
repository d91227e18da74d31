"""Authenticated API client for the Xero accounting API.

Resolves a valid access token, injects bearer and tenant headers, and maps
failed responses onto the error taxonomy. Requests are never retried here.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from xero_cli.auth import AuthManager
from xero_cli.config import Config
from xero_cli.models.auth import Connection
from xero_cli.utils.errors import ConfigError, NetworkError, classify_response

logger = logging.getLogger(__name__)


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class XeroClient:
    """HTTP client for the Xero API with token and tenant handling."""

    def __init__(self, config: Config, auth: AuthManager, verbose: bool = False) -> None:
        self._config = config
        self._auth = auth
        self._verbose = verbose
        self._http = httpx.Client(timeout=config.settings.timeout)

    @property
    def auth(self) -> AuthManager:
        return self._auth

    def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | list | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request against the accounting API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: API path (e.g. "/Invoices"). Appended to the API base URL.
            body: JSON request body.
            params: Query parameters.

        Returns:
            The decoded JSON body, unchanged.

        Raises:
            ConfigError: No tenant selected.
            AuthError: Token could not be refreshed, or the API answered 401.
            NetworkError: No response was received.
        """
        tenant_id = self._auth.store.load().tenant_id
        if not tenant_id:
            raise ConfigError("No tenant ID configured. Please run: xero auth login")

        token = self._auth.get_access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Xero-tenant-id": tenant_id,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        return self._send(method, self._config.endpoints.api_base_url + path, headers, body=body, params=params)

    execute = request

    def get(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for GET requests."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        """Convenience method for POST requests."""
        return self.request("POST", path, **kwargs)

    def get_connections(self) -> list[Connection]:
        """List the organisations connected to this app (no tenant header)."""
        token = self._auth.get_access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        data = self._send("GET", self._config.endpoints.connections_url, headers)
        return [Connection.model_validate(item) for item in data or []]

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        body: dict[str, Any] | list | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        if self._verbose:
            logger.info(f"{method} {url}")
            if params:
                logger.info(f"Params: {params}")

        try:
            response = self._http.request(
                method=method,
                url=url,
                headers=headers,
                json=body,
                params=params,
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"No response from Xero API. Check your internet connection. ({e})") from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")

        data = _decode(response)
        error = classify_response(response.status_code, data)
        if error is not None:
            raise error
        return data

    def close(self) -> None:
        """Close the underlying HTTP clients."""
        self._http.close()
        self._auth.close()
