"""Invoice service."""

from __future__ import annotations

from typing import Any

from xero_cli.client import XeroClient
from xero_cli.models.invoices import CreateInvoiceRequest

MAX_PAGE_SIZE = 100


class InvoiceService:
    """Service for listing, fetching and creating invoices."""

    def __init__(self, client: XeroClient) -> None:
        self._client = client

    def list(self, status: str | None = None, limit: int = 50, page: int = 1) -> list[dict[str, Any]]:
        """List invoices, optionally filtered by status (DRAFT, AUTHORISED, PAID, ...)."""
        params: dict[str, Any] = {"page": page}
        if status:
            params["Statuses"] = status.upper()
        if limit:
            params["pageSize"] = min(limit, MAX_PAGE_SIZE)

        data = self._client.get("/Invoices", params=params) or {}
        return data.get("Invoices", [])

    def get(self, invoice_id: str) -> dict[str, Any] | None:
        data = self._client.get(f"/Invoices/{invoice_id}") or {}
        invoices = data.get("Invoices", [])
        return invoices[0] if invoices else None

    def create(self, request: CreateInvoiceRequest) -> dict[str, Any] | None:
        body = {"Invoices": [request.model_dump(by_alias=True, exclude_none=True)]}
        data = self._client.post("/Invoices", body=body) or {}
        invoices = data.get("Invoices", [])
        return invoices[0] if invoices else None
