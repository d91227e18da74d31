"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """Response from the Xero identity token endpoint."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800
    refresh_token: str | None = None
    id_token: str | None = None
    scope: str | None = None


class TokenGrantResult(BaseModel):
    """Normalised outcome of a successful grant exchange."""
    access_token: str
    refresh_token: str | None = None
    expires_in_seconds: int
    token_expiry: int = Field(description="Absolute expiry in epoch milliseconds")


class TokenStatus(BaseModel):
    """Current state of the stored access token."""
    has_token: bool
    is_valid: bool
    has_refresh_token: bool = False
    expires_at: datetime | None = None
    seconds_remaining: int | None = None


class Connection(BaseModel):
    """A tenant connection returned by the connections endpoint."""
    id: str | None = None
    tenant_id: str = Field(alias="tenantId")
    tenant_name: str = Field(default="", alias="tenantName")
    tenant_type: str | None = Field(default=None, alias="tenantType")

    model_config = {"populate_by_name": True}


class CallbackResult(BaseModel):
    """Outcome of one login callback: either a code or an error."""
    code: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.code is not None and self.error is None

    @classmethod
    def success(cls, code: str) -> CallbackResult:
        return cls(code=code)

    @classmethod
    def failure(cls, error: str) -> CallbackResult:
        return cls(error=error)
