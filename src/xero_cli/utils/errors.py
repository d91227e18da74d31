"""Error taxonomy and structured error handling for agent-friendly output."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console

console = Console(stderr=True)


class XeroError(RuntimeError):
    """Base class for every error surfaced at the command boundary."""

    code = "RUNTIME_ERROR"
    hint: str | None = None


class ConfigError(XeroError):
    """Client credentials or tenant are missing."""

    code = "CONFIG_ERROR"
    hint = "Run `xero config set --client-id <id> --client-secret <secret>` then `xero auth login`"


class AuthError(XeroError):
    """Token is missing, expired or rejected."""

    code = "AUTH_ERROR"
    hint = "Token may have expired — run `xero auth login`"


class TokenExchangeError(AuthError):
    """Authorization-code grant rejected by the identity endpoint."""

    code = "TOKEN_EXCHANGE_FAILED"


class TokenRefreshError(AuthError):
    """Refresh-token grant rejected by the identity endpoint."""

    code = "TOKEN_REFRESH_FAILED"


class ForbiddenError(XeroError):
    code = "FORBIDDEN"
    hint = "Check the scopes granted to your Xero app"


# Name used by the error taxonomy; avoids shadowing the builtin PermissionError.
XeroPermissionError = ForbiddenError


class NotFoundError(XeroError):
    code = "NOT_FOUND"
    hint = "The specified resource does not exist — verify the ID"


class RateLimitError(XeroError):
    code = "RATE_LIMITED"
    hint = "Rate limited — wait a moment before retrying"


class ApiError(XeroError):
    """Any other non-2xx response from the Xero API."""

    code = "API_ERROR"

    def __init__(self, status: int, detail: str) -> None:
        self.status = status
        self.detail = detail
        super().__init__(f"API Error ({status}): {detail}")


class NetworkError(XeroError):
    code = "NETWORK_ERROR"
    hint = "Connection error — check network connectivity"


class ListenerError(XeroError):
    """The local OAuth callback listener could not bind its port."""

    code = "LISTENER_ERROR"
    hint = "Another process is using the port — pass a different --port"


def _detail(body: Any) -> str:
    """First available upstream detail field, else the raw body serialized."""
    if isinstance(body, dict):
        for key in ("Detail", "Message", "message"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str):
        return body
    return json.dumps(body, default=str)


def classify_response(status: int, body: Any = None) -> XeroError | None:
    """Map an HTTP status and decoded body to an error, or None on success."""
    if 200 <= status < 300:
        return None
    if status == 401:
        return AuthError("Authentication failed. Your token may have expired. Run: xero auth login")
    if status == 403:
        return ForbiddenError("Access forbidden. Check your API permissions.")
    if status == 404:
        return NotFoundError("Resource not found.")
    if status == 429:
        return RateLimitError("Rate limit exceeded. Please wait before retrying.")
    return ApiError(status, _detail(body))


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "AUTH_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    code = getattr(error, "code", "RUNTIME_ERROR")
    hint = getattr(error, "hint", None)

    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if isinstance(error, ApiError):
        error_obj["status"] = error.status
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    console.print(f"[red]✗ Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
