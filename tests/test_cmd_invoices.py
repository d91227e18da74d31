"""CLI tests for invoices command group."""
import json
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from xero_cli.commands.invoices_cmd import app
from xero_cli.utils.errors import ConfigError, RateLimitError

runner = CliRunner()

INVOICE = {
    "InvoiceID": "1f2e3d4c-0000-0000-0000-000000000000",
    "InvoiceNumber": "INV-001",
    "Type": "ACCREC",
    "Status": "AUTHORISED",
    "Contact": {"Name": "Acme"},
    "CurrencyCode": "NZD",
    "Total": 115.0,
    "DueDate": "/Date(1700000000000+0000)/",
    "LineItems": [{"Description": "Services", "Quantity": 1, "UnitAmount": 100, "LineAmount": 100}],
}


def _mock_build(mock_service):
    client = MagicMock()
    return client, mock_service


# ── list ─────────────────────────────────────────────────────────────

def test_list_invoices_json():
    svc = MagicMock()
    svc.list.return_value = [INVOICE]

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list", "--output", "json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["InvoiceNumber"] == "INV-001"


def test_list_json_shorthand():
    svc = MagicMock()
    svc.list.return_value = []

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_list_forwards_filters():
    svc = MagicMock()
    svc.list.return_value = []

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list", "--status", "PAID", "--limit", "10", "--page", "2", "--json"])
    assert result.exit_code == 0
    svc.list.assert_called_once_with(status="PAID", limit=10, page=2)


def test_list_table():
    svc = MagicMock()
    svc.list.return_value = [INVOICE]

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list"])
    assert result.exit_code == 0


def test_list_rate_limited():
    svc = MagicMock()
    svc.list.side_effect = RateLimitError("Rate limit exceeded. Please wait before retrying.")

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "RATE_LIMITED"


def test_list_without_tenant():
    svc = MagicMock()
    svc.list.side_effect = ConfigError("No tenant ID configured. Please run: xero auth login")

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "CONFIG_ERROR"


# ── get ──────────────────────────────────────────────────────────────

def test_get_invoice_table():
    svc = MagicMock()
    svc.get.return_value = INVOICE

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["get", "1f2e3d4c"])
    assert result.exit_code == 0
    svc.get.assert_called_once_with("1f2e3d4c")


def test_get_invoice_not_found():
    svc = MagicMock()
    svc.get.return_value = None

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["get", "missing"])
    assert result.exit_code == 1


# ── create ───────────────────────────────────────────────────────────

def test_create_invoice():
    svc = MagicMock()
    svc.create.return_value = INVOICE
    items = '[{"Description":"Services","Quantity":1,"UnitAmount":100,"AccountCode":"200"}]'

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["create", "--contact", "c1", "--line-items", items, "--json"])
    assert result.exit_code == 0
    request = svc.create.call_args[0][0]
    assert request.contact.contact_id == "c1"
    assert request.line_items[0].account_code == "200"
    assert request.status == "DRAFT"


def test_create_invalid_json():
    svc = MagicMock()

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)):
        result = runner.invoke(app, ["create", "--contact", "c1", "--line-items", "not json"])
    assert result.exit_code == 1
    svc.create.assert_not_called()


def test_create_dry_run():
    svc = MagicMock()
    items = '[{"Description":"Services","UnitAmount":100}]'

    with patch("xero_cli.commands.invoices_cmd._build_client", return_value=_mock_build(svc)) as build:
        result = runner.invoke(app, ["create", "--contact", "c1", "--line-items", items, "--dry-run"])
    assert result.exit_code == 0
    build.assert_not_called()
    assert json.loads(result.stdout)["Contact"] == {"ContactID": "c1"}
