"""CLI commands for contacts."""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from xero_cli.client import XeroClient
from xero_cli.commands.common import JsonOption, OutputOption, VerboseOption, build_client, resolve_format
from xero_cli.models.contacts import CreateContactRequest
from xero_cli.services.contacts import ContactService
from xero_cli.utils.errors import XeroError, handle_error
from xero_cli.utils.output import (
    Column,
    OutputFormat,
    print_detail,
    print_output,
    print_success,
    short_id,
    yes_no,
)

console = Console(stderr=True)
app = typer.Typer(name="contacts", help="Manage contacts.", no_args_is_help=True)

LIST_COLUMNS = [
    Column("ContactID", "ID", short_id),
    Column("Name", "Name"),
    Column("EmailAddress", "Email"),
    Column("IsSupplier", "Supplier", yes_no),
    Column("IsCustomer", "Customer", yes_no),
    Column("ContactStatus", "Status"),
]


def _build_client(verbose: bool = False) -> tuple[XeroClient, ContactService]:
    client = build_client(verbose)
    return client, ContactService(client)


def _default_phone(contact: dict) -> str | None:
    for phone in contact.get("Phones") or []:
        if phone.get("PhoneType") == "DEFAULT" and phone.get("PhoneNumber"):
            return phone["PhoneNumber"]
    return None


def _postal_address(contact: dict) -> dict:
    for address in contact.get("Addresses") or []:
        if address.get("AddressType") == "POBOX":
            return address
    return {}


@app.command("list")
def list_contacts(
    search: Annotated[str | None, typer.Option("--search", "-s", help="Search by name or email")] = None,
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List contacts."""
    client, service = _build_client(verbose)
    try:
        contacts = service.list(search=search)
        print_output(contacts, resolve_format(output, as_json), columns=LIST_COLUMNS, title="Contacts")
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("get")
def get_contact(
    contact_id: Annotated[str, typer.Argument(help="Contact ID")],
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Get a specific contact."""
    client, service = _build_client(verbose)
    try:
        contact = service.get(contact_id)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    if contact is None:
        console.print("[red]✗[/red] Contact not found")
        raise typer.Exit(1)

    fmt = resolve_format(output, as_json)
    if fmt != OutputFormat.TABLE:
        print_output(contact, fmt)
        return

    fields = [
        ("Contact ID", contact.get("ContactID")),
        ("Name", contact.get("Name")),
        ("Email", contact.get("EmailAddress")),
        ("Status", contact.get("ContactStatus")),
        ("Is Customer", yes_no(contact.get("IsCustomer"))),
        ("Is Supplier", yes_no(contact.get("IsSupplier"))),
    ]
    phone = _default_phone(contact)
    if phone:
        fields.append(("Phone", phone))
    postal = _postal_address(contact)
    if postal.get("City"):
        fields.append(("City", postal["City"]))
        fields.append(("Country", postal.get("Country")))
    print_detail("Contact Details", fields)


@app.command("create")
def create_contact(
    name: Annotated[str, typer.Option("--name", "-n", help="Contact name")],
    email: Annotated[str | None, typer.Option("--email", help="Email address")] = None,
    phone: Annotated[str | None, typer.Option("--phone", help="Phone number")] = None,
    output: OutputOption = OutputFormat.TABLE,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Create a new contact."""
    try:
        request = CreateContactRequest.build(name, email=email, phone=phone)
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid contact: {e}")
        raise typer.Exit(1)

    client, service = _build_client(verbose)
    try:
        contact = service.create(request)
    except XeroError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()

    if contact is None:
        console.print("[red]✗[/red] Xero returned no contact")
        raise typer.Exit(1)

    fmt = resolve_format(output, as_json)
    if fmt != OutputFormat.TABLE:
        print_output(contact, fmt)
        return

    print_success(f"Contact created: [bold]{contact.get('Name')}[/bold]")
    print_detail("Contact", [
        ("Contact ID", contact.get("ContactID")),
        ("Email", contact.get("EmailAddress")),
    ])
