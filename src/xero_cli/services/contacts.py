"""Contact service."""

from __future__ import annotations

from typing import Any

from xero_cli.client import XeroClient
from xero_cli.models.contacts import CreateContactRequest


class ContactService:
    """Service for listing, fetching and creating contacts."""

    def __init__(self, client: XeroClient) -> None:
        self._client = client

    def list(self, search: str | None = None) -> list[dict[str, Any]]:
        params = {"SearchTerm": search} if search else None
        data = self._client.get("/Contacts", params=params) or {}
        return data.get("Contacts", [])

    def get(self, contact_id: str) -> dict[str, Any] | None:
        data = self._client.get(f"/Contacts/{contact_id}") or {}
        contacts = data.get("Contacts", [])
        return contacts[0] if contacts else None

    def create(self, request: CreateContactRequest) -> dict[str, Any] | None:
        body = {"Contacts": [request.model_dump(by_alias=True, exclude_none=True)]}
        data = self._client.post("/Contacts", body=body) or {}
        contacts = data.get("Contacts", [])
        return contacts[0] if contacts else None
