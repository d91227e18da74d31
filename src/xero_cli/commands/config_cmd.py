"""CLI commands for managing stored configuration."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console

from xero_cli.config import get_config
from xero_cli.credentials import get_store, is_token_valid, now_ms
from xero_cli.utils.errors import XeroError, handle_error
from xero_cli.utils.output import OutputFormat, print_detail, print_json, print_success

console = Console(stderr=True)
app = typer.Typer(name="config", help="Manage CLI configuration.", no_args_is_help=True)


@app.command("set")
def set_config(
    client_id: Annotated[str | None, typer.Option("--client-id", help="Xero OAuth2 Client ID")] = None,
    client_secret: Annotated[str | None, typer.Option("--client-secret", help="Xero OAuth2 Client Secret")] = None,
    tenant_id: Annotated[str | None, typer.Option("--tenant-id", help="Xero Tenant/Organisation ID")] = None,
) -> None:
    """Set configuration values."""
    updates = {
        "client_id": client_id,
        "client_secret": client_secret,
        "tenant_id": tenant_id,
    }
    updates = {k: v for k, v in updates.items() if v}
    if not updates:
        console.print("[red]✗[/red] No options provided. Use --client-id, --client-secret, or --tenant-id")
        raise typer.Exit(1)

    try:
        get_store(get_config()).update(**updates)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)

    labels = {"client_id": "Client ID", "client_secret": "Client Secret", "tenant_id": "Tenant ID"}
    for key in updates:
        print_success(f"{labels[key]} set")


@app.command("show")
def show_config(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show current configuration (secrets masked)."""
    store = get_store(get_config())
    try:
        creds = store.load()
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)

    expiry = ""
    if creds.token_expiry:
        when = datetime.fromtimestamp(creds.token_expiry / 1000).isoformat(sep=" ", timespec="seconds")
        expiry = when if creds.token_expiry > now_ms() else f"expired ({when})"

    if output == OutputFormat.JSON:
        print_json({
            "config_file": str(store.path),
            "client_id": creds.client_id,
            "client_secret_set": bool(creds.client_secret),
            "tenant_id": creds.tenant_id,
            "access_token_set": bool(creds.access_token),
            "token_valid": is_token_valid(creds.access_token, creds.token_expiry, now_ms()),
            "token_expiry": expiry,
        })
        return

    print_detail("Xero CLI Configuration", [
        ("Config File", str(store.path)),
        ("Client ID", creds.client_id or "not set"),
        ("Client Secret", "*" * 8 if creds.client_secret else "not set"),
        ("Tenant ID", creds.tenant_id or "not set (run: xero auth login)"),
        ("Access Token", "set" if creds.access_token else "not set"),
        ("Token Expiry", expiry or "N/A"),
    ])


@app.command("clear")
def clear_config(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Remove all stored credentials, tokens and tenant."""
    if not yes:
        typer.confirm("Clear all stored Xero configuration?", abort=True)
    get_store(get_config()).clear()
    print_success("Configuration cleared")
