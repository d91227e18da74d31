"""Read-only ledger services: accounts, payments and bank transactions."""

from __future__ import annotations

from typing import Any

from xero_cli.client import XeroClient


class AccountService:
    """Chart of accounts."""

    def __init__(self, client: XeroClient) -> None:
        self._client = client

    def list(self) -> list[dict[str, Any]]:
        data = self._client.get("/Accounts") or {}
        return data.get("Accounts", [])


class PaymentService:
    def __init__(self, client: XeroClient) -> None:
        self._client = client

    def list(self) -> list[dict[str, Any]]:
        data = self._client.get("/Payments") or {}
        return data.get("Payments", [])


class BankTransactionService:
    def __init__(self, client: XeroClient) -> None:
        self._client = client

    def list(self, account_id: str | None = None) -> list[dict[str, Any]]:
        """List bank transactions, optionally for a single bank account."""
        params = {"BankAccountID": account_id} if account_id else None
        data = self._client.get("/BankTransactions", params=params) or {}
        return data.get("BankTransactions", [])
