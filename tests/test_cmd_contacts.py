"""CLI tests for contacts command group."""
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from xero_cli.commands.contacts_cmd import app
from xero_cli.utils.errors import NotFoundError

runner = CliRunner()

CONTACT = {
    "ContactID": "c0ffee00-0000-0000-0000-000000000000",
    "Name": "Acme",
    "EmailAddress": "a@acme.test",
    "IsCustomer": True,
    "Phones": [{"PhoneType": "DEFAULT", "PhoneNumber": "555"}],
    "Addresses": [{"AddressType": "POBOX", "City": "Wellington", "Country": "NZ"}],
}


def _mock_build(mock_service):
    return MagicMock(), mock_service


def test_list_contacts_search():
    svc = MagicMock()
    svc.list.return_value = [CONTACT]

    with patch("xero_cli.commands.contacts_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list", "--search", "acme", "--json"])
    assert result.exit_code == 0
    svc.list.assert_called_once_with(search="acme")
    assert json.loads(result.stdout)[0]["Name"] == "Acme"


def test_list_contacts_csv():
    svc = MagicMock()
    svc.list.return_value = [CONTACT]

    with patch("xero_cli.commands.contacts_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list", "--output", "csv"])
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0].strip() == "ID,Name,Email,Supplier,Customer,Status"


def test_get_contact_table():
    svc = MagicMock()
    svc.get.return_value = CONTACT

    with patch("xero_cli.commands.contacts_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["get", "c0ffee00"])
    assert result.exit_code == 0


def test_get_contact_api_404():
    svc = MagicMock()
    svc.get.side_effect = NotFoundError("Resource not found.")

    with patch("xero_cli.commands.contacts_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["get", "nope"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "NOT_FOUND"


def test_create_contact():
    svc = MagicMock()
    svc.create.return_value = CONTACT

    with patch("xero_cli.commands.contacts_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["create", "--name", "Acme", "--phone", "555"])
    assert result.exit_code == 0
    request = svc.create.call_args[0][0]
    assert request.name == "Acme"
    assert request.phones[0].phone_number == "555"
    assert request.email_address is None
