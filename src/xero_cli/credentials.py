"""Persistent credential storage.

Holds the client identity, tokens, expiry and selected tenant. The record is
stored as a single JSON document with camelCase keys.
"""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from xero_cli.config import Config
from xero_cli.utils.errors import ConfigError

logger = logging.getLogger(__name__)

# Tokens expiring within this window are treated as already expired
EXPIRY_MARGIN_MS = 60_000


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def is_token_valid(access_token: str, token_expiry: int, now: int) -> bool:
    """Whether an access token can be used at ``now`` (epoch ms)."""
    if not access_token:
        return False
    return token_expiry - now > EXPIRY_MARGIN_MS


class Credentials(BaseModel):
    """The persisted credential record."""
    client_id: str = Field(default="", alias="clientId")
    client_secret: str = Field(default="", alias="clientSecret")
    access_token: str = Field(default="", alias="accessToken")
    refresh_token: str = Field(default="", alias="refreshToken")
    token_expiry: int = Field(default=0, alias="tokenExpiry")
    tenant_id: str = Field(default="", alias="tenantId")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class CredentialStore:
    """Key/value access to the credential record.

    Subclasses implement ``_read`` and ``_write``. Every ``update`` replaces
    whole fields and is persisted in a single write.
    """

    def load(self) -> Credentials:
        return self._read()

    def update(self, **fields: Any) -> Credentials:
        """Replace the named fields and persist the record."""
        current = self._read()
        unknown = set(fields) - set(Credentials.model_fields)
        if unknown:
            raise KeyError(f"Unknown credential fields: {', '.join(sorted(unknown))}")
        updated = current.model_copy(update=fields)
        self._write(updated)
        return updated

    def clear(self) -> None:
        """Reset every field to its default."""
        self._write(Credentials())

    def is_configured(self) -> bool:
        creds = self._read()
        return bool(creds.client_id and creds.client_secret)

    def has_valid_token(self, now: int | None = None) -> bool:
        creds = self._read()
        return is_token_valid(creds.access_token, creds.token_expiry, now_ms() if now is None else now)

    def _read(self) -> Credentials:
        raise NotImplementedError

    def _write(self, credentials: Credentials) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    """In-process store, used by tests."""

    def __init__(self, credentials: Credentials | None = None) -> None:
        self._credentials = credentials or Credentials()

    def _read(self) -> Credentials:
        return self._credentials.model_copy()

    def _write(self, credentials: Credentials) -> None:
        self._credentials = credentials.model_copy()


class FileCredentialStore(CredentialStore):
    """JSON file store at ``{config_dir}/config.json``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Credentials:
        if not self._path.exists():
            return Credentials()

        text = self._path.read_text()
        if not text.strip():
            return Credentials()

        try:
            return Credentials.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Credential file {self._path} is corrupt: {e}") from e

    def _write(self, credentials: Credentials) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(credentials.model_dump(by_alias=True), f, indent=2)
        os.replace(tmp_path, self._path)
        logger.debug(f"Saved credentials to {self._path}")


def get_store(config: Config) -> FileCredentialStore:
    """The credential file for a loaded Config."""
    return FileCredentialStore(config.settings.credentials_path)
