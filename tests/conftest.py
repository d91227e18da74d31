"""Shared fixtures for the xero-cli test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from xero_cli.config import Config, Endpoints, Settings
from xero_cli.credentials import Credentials, MemoryCredentialStore

# Fixed "now" for tests, in epoch milliseconds
NOW_MS = 1_700_000_000_000


@pytest.fixture
def fake_settings(tmp_path) -> Settings:
    return Settings(
        config_dir=str(tmp_path),
        callback_port=8765,
        timeout=5.0,
    )


@pytest.fixture
def fake_config(fake_settings) -> Config:
    return Config(settings=fake_settings, endpoints=Endpoints())


@pytest.fixture
def clock():
    return lambda: NOW_MS


@pytest.fixture
def configured_store() -> MemoryCredentialStore:
    """Client credentials set, valid token, tenant selected."""
    return MemoryCredentialStore(Credentials(
        client_id="test-client-id",
        client_secret="test-client-secret",
        access_token="AT0",
        refresh_token="RT0",
        token_expiry=NOW_MS + 30 * 60 * 1000,
        tenant_id="tenant-1",
    ))


@pytest.fixture
def mock_client():
    """MagicMock standing in for XeroClient."""
    client = MagicMock()
    client.get = MagicMock()
    client.post = MagicMock()
    client.close = MagicMock()
    return client

