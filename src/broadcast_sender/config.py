"""Configuration loading and defaults."""

from __future__ import annotations

import os
from copy import deepcopy
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict
from urllib.parse import urlparse

import yaml

from .types import Credentials

DEFAULT_SETTINGS: Dict[str, Any] = {
    "broadcast": {
        "timezone": "UTC",
        "ending_in_minutes": 60,
    },
    "auth": {
        "authority": "https://login.microsoftonline.com",
    },
    "http": {
        "timeout_seconds": 20,
    },
    "logging": {
        "level": "INFO",
    },
}

ENV_TENANT_ID = "BROADCAST_TENANT_ID"
ENV_CLIENT_ID = "BROADCAST_CLIENT_ID"
ENV_CLIENT_SECRET = "BROADCAST_CLIENT_SECRET"
ENV_URL = "BROADCAST_URL"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        # An empty YAML key ("broadcast:") keeps the defaults.
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Returns one settings section, or an empty mapping if it is missing or not a mapping."""
    value = config.get(name)
    return value if isinstance(value, dict) else {}


def load_settings(settings_path: str = "config/settings.yaml") -> Dict[str, Any]:
    """Loads settings.yaml and merges it onto defaults."""
    merged = deepcopy(DEFAULT_SETTINGS)
    config_path = Path(settings_path)
    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            user_cfg = yaml.safe_load(f) or {}
        if not isinstance(user_cfg, dict):
            raise ValueError(f"Settings file must contain a mapping: {settings_path}")
        merged = _deep_merge(merged, user_cfg)
    return merged


def credentials_from_env(
    tenant_id: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> Credentials:
    """Explicit values win; anything left empty is read from the environment."""
    return Credentials(
        tenant_id=(tenant_id or os.getenv(ENV_TENANT_ID) or "").strip(),
        client_id=(client_id or os.getenv(ENV_CLIENT_ID) or "").strip(),
        client_secret=client_secret or os.getenv(ENV_CLIENT_SECRET) or "",
    )


@dataclass(frozen=True)
class BroadcastOptions:
    """Inputs for one broadcast message.

    ``start_time`` of ``None`` means "now" in host local time. ``resource``
    is the token audience and defaults to ``url``. ``ending_in_minutes`` is
    not checked for sign: zero or negative windows are sent as computed.
    """

    url: str
    timezone: str = "UTC"
    start_time: datetime | None = None
    ending_in_minutes: int = 60
    timeout_seconds: float = 20
    authority: str = "https://login.microsoftonline.com"
    resource: str | None = None
    dry_run: bool = False

    def __post_init__(self) -> None:
        url = (self.url or "").strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid environment URL: {self.url!r}")
        object.__setattr__(self, "url", url)

        if isinstance(self.ending_in_minutes, bool) or not isinstance(self.ending_in_minutes, int):
            raise ValueError(f"ending_in_minutes must be an integer, got {self.ending_in_minutes!r}")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if not (self.authority or "").strip():
            raise ValueError("authority must not be empty")
        object.__setattr__(self, "authority", self.authority.strip().rstrip("/"))
        object.__setattr__(self, "timezone", (self.timezone or "").strip() or "UTC")

    @property
    def token_resource(self) -> str:
        return (self.resource or self.url).rstrip("/")

    @classmethod
    def from_settings(cls, config: Dict[str, Any], url: str, **overrides: Any) -> "BroadcastOptions":
        """Builds options from merged settings; ``None`` overrides fall back to settings."""
        broadcast_cfg = section(config, "broadcast")
        auth_cfg = section(config, "auth")
        values: Dict[str, Any] = {
            "url": url,
            "timezone": str(broadcast_cfg.get("timezone", "UTC")),
            "ending_in_minutes": int(broadcast_cfg.get("ending_in_minutes", 60)),
            "timeout_seconds": float(section(config, "http").get("timeout_seconds", 20)),
            "authority": str(auth_cfg.get("authority") or "https://login.microsoftonline.com"),
            "resource": auth_cfg.get("resource"),
        }
        for key, value in overrides.items():
            if value is not None:
                values[key] = value
        return cls(**values)
