"""Contact data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Phone(BaseModel):
    phone_type: str = Field(default="DEFAULT", alias="PhoneType")
    phone_number: str = Field(alias="PhoneNumber")

    model_config = {"populate_by_name": True}


class CreateContactRequest(BaseModel):
    name: str = Field(alias="Name", min_length=1)
    email_address: str | None = Field(default=None, alias="EmailAddress")
    phones: list[Phone] | None = Field(default=None, alias="Phones")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, name: str, email: str | None = None, phone: str | None = None) -> CreateContactRequest:
        return cls(
            name=name,
            email_address=email or None,
            phones=[Phone(phone_number=phone)] if phone else None,
        )
