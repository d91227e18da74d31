"""Invoice data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LineItem(BaseModel):
    description: str = Field(alias="Description")
    quantity: float = Field(default=1.0, alias="Quantity")
    unit_amount: float = Field(default=0.0, alias="UnitAmount")
    account_code: str | None = Field(default=None, alias="AccountCode")
    tax_type: str | None = Field(default=None, alias="TaxType")
    item_code: str | None = Field(default=None, alias="ItemCode")

    model_config = {"populate_by_name": True}


class ContactRef(BaseModel):
    contact_id: str = Field(alias="ContactID")

    model_config = {"populate_by_name": True}


class CreateInvoiceRequest(BaseModel):
    type: str = Field(default="ACCREC", alias="Type")  # ACCREC or ACCPAY
    status: str = Field(default="DRAFT", alias="Status")  # DRAFT, SUBMITTED, AUTHORISED
    contact: ContactRef = Field(alias="Contact")
    line_items: list[LineItem] = Field(alias="LineItems", min_length=1)
    due_date: str | None = Field(default=None, alias="DueDate")
    reference: str | None = Field(default=None, alias="Reference")

    model_config = {"populate_by_name": True}
