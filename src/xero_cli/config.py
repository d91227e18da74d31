"""Configuration management for Xero CLI.

Loads settings from the environment (and a local .env) with an optional
settings.yaml overlay in the config directory.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SCOPES = "offline_access accounting.transactions accounting.contacts accounting.settings"
DEFAULT_CALLBACK_PORT = 8765


class Endpoints(BaseModel):
    """Xero identity and API endpoints."""
    token_url: str = "https://identity.xero.com/connect/token"
    authorize_url: str = "https://login.xero.com/identity/connect/authorize"
    connections_url: str = "https://api.xero.com/connections"
    api_base_url: str = "https://api.xero.com/api.xro/2.0"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    config_dir: str = Field(default="~/.config/xero-cli", description="Directory holding config.json")
    callback_port: int = Field(default=DEFAULT_CALLBACK_PORT, description="Local OAuth callback port")
    scopes: str = Field(default=DEFAULT_SCOPES, description="OAuth scopes requested at login")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    verify_state: bool = Field(default=True, description="Reject callbacks with a mismatched state")
    open_browser: bool = Field(default=True, description="Open the authorization URL in a browser")

    @property
    def credentials_path(self) -> Path:
        return Path(self.config_dir).expanduser() / "config.json"


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings = Field(default_factory=Settings)
    endpoints: Endpoints = Field(default_factory=Endpoints)


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes", "on")


def _load_yaml(config_dir: str) -> dict[str, Any]:
    """Load the optional settings.yaml from the config directory."""
    path = Path(config_dir).expanduser() / "settings.yaml"
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}")
    unknown = set(data) - {"settings", "endpoints"}
    if unknown:
        raise ValueError(f"Unknown sections in {path}: {', '.join(sorted(unknown))}")
    return data


def _env_overrides() -> dict[str, Any]:
    """Settings explicitly provided through the environment."""
    overrides: dict[str, Any] = {}
    if port := _env("XERO_CALLBACK_PORT"):
        overrides["callback_port"] = int(port)
    if scopes := _env("XERO_SCOPES"):
        overrides["scopes"] = scopes
    if timeout := _env("XERO_TIMEOUT"):
        overrides["timeout"] = float(timeout)
    if verify := _env("XERO_VERIFY_STATE"):
        overrides["verify_state"] = _as_bool(verify)
    if browser := _env("XERO_OPEN_BROWSER"):
        overrides["open_browser"] = _as_bool(browser)
    return overrides


def _load_config() -> Config:
    """Build the configuration from defaults, settings.yaml and env vars.

    Precedence (highest first): environment, settings.yaml, built-in defaults.
    """
    config_dir = _env("XERO_CONFIG_DIR", default=Settings().config_dir)
    data = _load_yaml(config_dir)

    settings_data = dict(data.get("settings") or {})
    settings_data["config_dir"] = config_dir
    settings_data.update(_env_overrides())

    return Config(
        settings=Settings(**settings_data),
        endpoints=Endpoints(**(data.get("endpoints") or {})),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    return _load_config()
