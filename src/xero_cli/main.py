"""Xero CLI — entry point.

Agent-friendly CLI for the Xero accounting API: invoices, contacts,
accounts, payments and bank transactions.
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

import typer

from xero_cli.commands.auth_cmd import app as auth_app
from xero_cli.commands.config_cmd import app as config_app
from xero_cli.commands.contacts_cmd import app as contacts_app
from xero_cli.commands.invoices_cmd import app as invoices_app
from xero_cli.commands.ledger_cmd import accounts_app, bank_app, payments_app

app = typer.Typer(
    name="xero",
    help="Xero CLI - Cloud accounting from your terminal.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(config_app, name="config")
app.add_typer(auth_app, name="auth")
app.add_typer(invoices_app, name="invoices")
app.add_typer(contacts_app, name="contacts")
app.add_typer(accounts_app, name="accounts")
app.add_typer(payments_app, name="payments")
app.add_typer(bank_app, name="bank-transactions")


def _version_callback(value: bool) -> None:
    if value:
        try:
            typer.echo(version("xero-cli"))
        except PackageNotFoundError:
            typer.echo("unknown")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit",
    ),
) -> None:
    """Xero CLI — manage invoices, contacts and accounting data."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
