"""CLI commands for invoices."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from xero_cli.client import XeroClient
from xero_cli.commands.common import JsonOption, OutputOption, VerboseOption, build_client, resolve_format
from xero_cli.models.invoices import ContactRef, CreateInvoiceRequest, LineItem
from xero_cli.services.invoices import InvoiceService
from xero_cli.utils.errors import XeroError, handle_error
from xero_cli.utils.output import (
    Column,
    OutputFormat,
    money,
    nested_name,
    print_detail,
    print_json,
    print_output,
    print_success,
    short_id,
    xero_date,
)

console = Console(stderr=True)
app = typer.Typer(name="invoices", help="Manage invoices.", no_args_is_help=True)

LIST_COLUMNS = [
    Column("InvoiceID", "ID", short_id),
    Column("InvoiceNumber", "Number"),
    Column("Contact", "Contact", nested_name),
    Column("Status", "Status"),
    Column("Total", "Total", money),
    Column("CurrencyCode", "Currency"),
    Column("DueDate", "Due Date", xero_date),
]

LINE_ITEM_COLUMNS = [
    Column("Description", "Description"),
    Column("Quantity", "Qty", lambda v: str(v) if v is not None else "1"),
    Column("UnitAmount", "Unit Price", money),
    Column("TaxType", "Tax Type"),
    Column("LineAmount", "Amount", money),
]


def _build_client(verbose: bool = False) -> tuple[XeroClient, InvoiceService]:
    client = build_client(verbose)
    return client, InvoiceService(client)


@app.command("list")
def list_invoices(
    status: Annotated[str | None, typer.Option("--status", "-s", help="Filter by status (DRAFT|SUBMITTED|AUTHORISED|PAID|VOIDED)")] = None,
    limit: Annotated[int, typer.Option("--limit", "-l", help="Maximum number of results (max 100)")] = 50,
    page: Annotated[int, typer.Option("--page", help="Page number")] = 1,
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List invoices."""
    client, service = _build_client(verbose)
    try:
        invoices = service.list(status=status, limit=limit, page=page)
        print_output(invoices, resolve_format(output, as_json), columns=LIST_COLUMNS, title="Invoices")
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("get")
def get_invoice(
    invoice_id: Annotated[str, typer.Argument(help="Invoice ID")],
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Get a specific invoice."""
    client, service = _build_client(verbose)
    try:
        invoice = service.get(invoice_id)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    if invoice is None:
        console.print("[red]✗[/red] Invoice not found")
        raise typer.Exit(1)

    fmt = resolve_format(output, as_json)
    if fmt != OutputFormat.TABLE:
        print_output(invoice, fmt)
        return

    print_detail("Invoice Details", [
        ("Invoice ID", invoice.get("InvoiceID")),
        ("Number", invoice.get("InvoiceNumber")),
        ("Type", invoice.get("Type")),
        ("Status", invoice.get("Status")),
        ("Contact", nested_name(invoice.get("Contact"))),
        ("Reference", invoice.get("Reference")),
        ("Currency", invoice.get("CurrencyCode")),
        ("Due Date", xero_date(invoice.get("DueDateString") or invoice.get("DueDate"))),
        ("Sub Total", money(invoice.get("SubTotal"))),
        ("Total Tax", money(invoice.get("TotalTax"))),
        ("Total", money(invoice.get("Total"))),
        ("Amount Due", money(invoice.get("AmountDue"))),
        ("Amount Paid", money(invoice.get("AmountPaid"))),
    ])
    if invoice.get("LineItems"):
        print_output(invoice["LineItems"], fmt, columns=LINE_ITEM_COLUMNS, title="Line Items")


@app.command("create")
def create_invoice(
    contact: Annotated[str, typer.Option("--contact", "-c", help="Contact ID")],
    line_items: Annotated[str, typer.Option(
        "--line-items",
        help='Line items as JSON array, e.g. \'[{"Description":"Services","Quantity":1,"UnitAmount":100,"AccountCode":"200"}]\'',
    )],
    invoice_type: Annotated[str, typer.Option("--type", help="Invoice type (ACCREC|ACCPAY)")] = "ACCREC",
    status: Annotated[str, typer.Option("--status", help="Invoice status (DRAFT|SUBMITTED|AUTHORISED)")] = "DRAFT",
    due_date: Annotated[str | None, typer.Option("--due-date", help="Due date (YYYY-MM-DD)")] = None,
    reference: Annotated[str | None, typer.Option("--reference", help="Invoice reference")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show what would be sent without executing")] = False,
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Create a new invoice."""
    try:
        items = json.loads(line_items)
        if not isinstance(items, list):
            raise ValueError("expected a JSON array")
        request = CreateInvoiceRequest(
            type=invoice_type.upper(),
            status=status.upper(),
            contact=ContactRef(contact_id=contact),
            line_items=[LineItem.model_validate(item) for item in items],
            due_date=due_date,
            reference=reference,
        )
    except (ValueError, ValidationError) as e:
        console.print(f"[red]✗[/red] Invalid JSON for --line-items: {e}")
        raise typer.Exit(1)

    fmt = resolve_format(output, as_json)
    if dry_run:
        console.print("[yellow]DRY RUN:[/yellow] Would create invoice:")
        print_json(request.model_dump(by_alias=True, exclude_none=True))
        return

    client, service = _build_client(verbose)
    try:
        invoice = service.create(request)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    if invoice is None:
        console.print("[red]✗[/red] Xero returned no invoice")
        raise typer.Exit(1)

    if fmt != OutputFormat.TABLE:
        print_output(invoice, fmt)
        return

    print_success(f"Invoice created: [bold]{invoice.get('InvoiceID')}[/bold]")
    print_detail("Invoice", [
        ("Number", invoice.get("InvoiceNumber")),
        ("Status", invoice.get("Status")),
        ("Total", f"{money(invoice.get('Total'))} {invoice.get('CurrencyCode', '')}".strip()),
    ])
