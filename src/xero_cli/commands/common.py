"""Shared helpers for command modules."""

from __future__ import annotations

from typing import Annotated

import typer

from xero_cli.auth import AuthManager
from xero_cli.client import XeroClient
from xero_cli.config import get_config
from xero_cli.credentials import get_store
from xero_cli.utils.errors import ConfigError, handle_error
from xero_cli.utils.output import OutputFormat

OutputOption = Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON (same as --output json)")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")]


def resolve_format(output: OutputFormat, as_json: bool) -> OutputFormat:
    return OutputFormat.JSON if as_json else output


def build_client(verbose: bool = False, require_credentials: bool = True) -> XeroClient:
    """Wire config, credential store, auth and client for a command.

    Exits with status 1 when client credentials are not configured.
    """
    config = get_config()
    store = get_store(config)
    if require_credentials and not store.is_configured():
        handle_error(ConfigError(
            "Xero credentials not configured. Run: "
            "xero config set --client-id <id> --client-secret <secret> && xero auth login"
        ))
        raise typer.Exit(1)

    auth = AuthManager(config, store)
    return XeroClient(config, auth, verbose=verbose)
