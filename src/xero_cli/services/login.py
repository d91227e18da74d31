"""Interactive OAuth login: callback, code exchange and tenant selection."""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable

from pydantic import BaseModel, Field
from rich.console import Console

from xero_cli.auth import build_authorization_url, generate_state
from xero_cli.callback import CallbackListener
from xero_cli.client import XeroClient
from xero_cli.config import Config
from xero_cli.models.auth import Connection
from xero_cli.utils.errors import AuthError, ConfigError, XeroError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class LoginResult(BaseModel):
    """Outcome of a completed login.

    ``partial`` is set when tokens were stored but no organisation could be
    selected; ``tenant_id`` is then empty.
    """
    tenant_id: str = ""
    tenant_name: str = ""
    connections: list[Connection] = Field(default_factory=list)
    warning: str | None = None
    partial: bool = False
    reason: str | None = None


class LoginService:
    """Runs the authorization-code flow against a local callback listener."""

    def __init__(
        self,
        config: Config,
        client: XeroClient,
        listener_factory: Callable[..., CallbackListener] = CallbackListener,
        opener: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._config = config
        self._client = client
        self._listener_factory = listener_factory
        self._opener = opener

    def login(
        self,
        port: int | None = None,
        timeout: float | None = None,
        open_browser: bool | None = None,
    ) -> LoginResult:
        """Authenticate in the browser and select the first connected tenant.

        Raises:
            ConfigError: Client id/secret not configured.
            ListenerError: The callback port could not be bound.
            AuthError: The callback reported an error, or the code exchange failed.
        """
        settings = self._config.settings
        store = self._client.auth.store
        creds = store.load()
        if not creds.client_id or not creds.client_secret:
            raise ConfigError(
                "Please configure your credentials first: "
                "xero config set --client-id <id> --client-secret <secret>"
            )

        state = generate_state()
        listener = self._listener_factory(
            port=settings.callback_port if port is None else port,
            expected_state=state if settings.verify_state else None,
        )
        with listener:
            redirect_uri = listener.redirect_uri
            url = build_authorization_url(
                self._config.endpoints.authorize_url,
                creds.client_id,
                redirect_uri,
                settings.scopes,
                state,
            )
            console.print("Open this URL in your browser to authenticate:\n")
            console.print(url, style="cyan", soft_wrap=True)
            console.print(f"\n[dim]Waiting for callback on port {listener.port}...[/dim]")
            should_open = settings.open_browser if open_browser is None else open_browser
            if should_open:
                self._opener(url)
            result = listener.wait(timeout)

        if not result.ok:
            raise AuthError(f"Login failed: {result.error}")

        self._client.auth.exchange_authorization_code(result.code, redirect_uri)
        # tenant from a previous login may belong to another account
        self._client.auth.store.update(tenant_id="")
        return self._select_tenant()

    def _select_tenant(self) -> LoginResult:
        store = self._client.auth.store
        try:
            connections = self._client.get_connections()
        except XeroError as e:
            logger.warning(f"Authenticated, but fetching organisations failed: {e}")
            return LoginResult(partial=True, reason=f"Could not fetch organisations: {e}")

        if not connections:
            return LoginResult(partial=True, reason="No organisations are connected to this app")

        tenant = connections[0]
        store.update(tenant_id=tenant.tenant_id)

        warning = None
        if len(connections) > 1:
            warning = f"Multiple organisations found. Using first one: {tenant.tenant_name}"
            logger.warning(warning)

        return LoginResult(
            tenant_id=tenant.tenant_id,
            tenant_name=tenant.tenant_name,
            connections=connections,
            warning=warning,
        )
