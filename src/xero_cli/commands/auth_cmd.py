"""CLI commands for authentication management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from xero_cli.commands.common import OutputOption, build_client
from xero_cli.config import get_config
from xero_cli.services.login import LoginService
from xero_cli.utils.errors import XeroError, handle_error
from xero_cli.utils.output import OutputFormat, print_output, print_success

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Manage authentication.", no_args_is_help=True)


@app.command()
def login(
    port: Annotated[int | None, typer.Option("--port", "-p", help="Local callback port (default 8765)")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Seconds to wait for the browser callback")] = None,
    no_browser: Annotated[bool, typer.Option("--no-browser", help="Print the URL without opening a browser")] = False,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Authenticate with Xero via OAuth 2.0."""
    client = build_client()
    service = LoginService(get_config(), client)

    try:
        console.print("\n[bold]Xero OAuth 2.0 Login[/bold]\n")
        result = service.login(port=port, timeout=timeout, open_browser=False if no_browser else None)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    if result.partial:
        console.print("[green]✓[/green] Tokens obtained")
        console.print(f"[yellow]Authenticated, but no organisation selected:[/yellow] {result.reason}")
        console.print("Set one manually with: [cyan]xero config set --tenant-id <tenant-id>[/cyan]")
        raise typer.Exit(2)

    print_success(f"Connected to organisation: [bold]{result.tenant_name}[/bold]")
    if result.warning:
        console.print(f"\n[yellow]{result.warning}[/yellow]")
        console.print("To use a different organisation, run:")
        console.print("  [cyan]xero config set --tenant-id <tenant-id>[/cyan]")

    if output == OutputFormat.JSON or len(result.connections) > 1:
        rows = [
            {"tenantId": c.tenant_id, "tenantName": c.tenant_name, "selected": c.tenant_id == result.tenant_id}
            for c in result.connections
        ]
        print_output(rows, output, title="Available Organisations")


@app.command()
def status(
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Check authentication status against the connections endpoint."""
    client = build_client()

    try:
        connections = client.get_connections()
        current = client.auth.store.load().tenant_id
        token = client.auth.get_status()
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    print_success("Authenticated with Xero")
    rows = [
        {
            "current": "*" if c.tenant_id == current else "",
            "tenantId": c.tenant_id,
            "tenantName": c.tenant_name,
        }
        for c in connections
    ]
    if output == OutputFormat.JSON:
        print_output({
            "authenticated": True,
            "expires_at": str(token.expires_at) if token.expires_at else None,
            "seconds_remaining": token.seconds_remaining,
            "connections": rows,
        }, output)
        return
    print_output(rows, output, title="Connected Organisations")


@app.command()
def refresh(
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """Force refresh the access token."""
    client = build_client()

    try:
        console.print("Refreshing access token...", style="yellow")
        client.auth.refresh_access_token()
        token = client.auth.get_status()
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    result = {
        "status": "refreshed",
        "expires_at": str(token.expires_at),
        "seconds_remaining": token.seconds_remaining,
    }
    print_output(result, output, title="Token Refreshed")


@app.command()
def logout() -> None:
    """Forget tokens and tenant; keep the client id and secret."""
    client = build_client(require_credentials=False)
    try:
        client.auth.store.update(access_token="", refresh_token="", token_expiry=0, tenant_id="")
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
    print_success("Logged out")
