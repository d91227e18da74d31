"""CLI commands for accounts, payments and bank transactions."""

from __future__ import annotations

from typing import Annotated, Any

import typer

from xero_cli.commands.common import JsonOption, OutputOption, VerboseOption, build_client, resolve_format
from xero_cli.services.ledger import AccountService, BankTransactionService, PaymentService
from xero_cli.utils.errors import XeroError, handle_error
from xero_cli.utils.output import Column, OutputFormat, money, nested_name, print_output, short_id

accounts_app = typer.Typer(name="accounts", help="Manage accounts.", no_args_is_help=True)
payments_app = typer.Typer(name="payments", help="Manage payments.", no_args_is_help=True)
bank_app = typer.Typer(name="bank-transactions", help="View bank transactions.", no_args_is_help=True)

ACCOUNT_COLUMNS = [
    Column("Code", "Code"),
    Column("Name", "Name"),
    Column("Type", "Type"),
    Column("Class", "Class"),
    Column("Status", "Status"),
    Column("Description", "Description"),
]


def _payment_invoice(value: Any) -> str:
    if not isinstance(value, dict):
        return "N/A"
    return value.get("InvoiceNumber") or short_id(value.get("InvoiceID")) or "N/A"


PAYMENT_COLUMNS = [
    Column("PaymentID", "ID", short_id),
    Column("Invoice", "Invoice", _payment_invoice),
    Column("Account", "Account", nested_name),
    Column("Amount", "Amount", money),
    Column("CurrencyRate", "Currency Rate", lambda v: str(v) if v is not None else "1"),
    Column("Status", "Status"),
    Column("PaymentType", "Type"),
]

BANK_TRANSACTION_COLUMNS = [
    Column("BankTransactionID", "ID", short_id),
    Column("Type", "Type"),
    Column("Contact", "Contact", nested_name),
    Column("BankAccount", "Account", nested_name),
    Column("Total", "Total", money),
    Column("Status", "Status"),
]


@accounts_app.command("list")
def list_accounts(
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List chart of accounts."""
    client = build_client(verbose)
    try:
        accounts = AccountService(client).list()
        print_output(accounts, resolve_format(output, as_json), columns=ACCOUNT_COLUMNS, title="Accounts")
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@payments_app.command("list")
def list_payments(
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List payments."""
    client = build_client(verbose)
    try:
        payments = PaymentService(client).list()
        print_output(payments, resolve_format(output, as_json), columns=PAYMENT_COLUMNS, title="Payments")
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@bank_app.command("list")
def list_bank_transactions(
    account_id: Annotated[str | None, typer.Option("--account-id", help="Filter by bank account ID")] = None,
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List bank transactions."""
    client = build_client(verbose)
    try:
        transactions = BankTransactionService(client).list(account_id=account_id)
        print_output(
            transactions, resolve_format(output, as_json),
            columns=BANK_TRANSACTION_COLUMNS, title="Bank Transactions",
        )
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
