"""Shared broadcast data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Credentials:
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)

    def missing_fields(self) -> list[str]:
        missing = []
        for name in ("tenant_id", "client_id", "client_secret"):
            if not str(getattr(self, name) or "").strip():
                missing.append(name)
        return missing


@dataclass(frozen=True)
class TimeWindow:
    start: str
    end: str
    timezone: str


@dataclass
class BroadcastResult:
    ok: bool
    message_id: Any = None
    window: TimeWindow | None = None
    error_kind: str | None = None
    error: str | None = None
    dry_run: bool = False

    @classmethod
    def success(cls, message_id: Any, window: TimeWindow, dry_run: bool = False) -> "BroadcastResult":
        return cls(ok=True, message_id=message_id, window=window, dry_run=dry_run)

    @classmethod
    def failure(cls, error_kind: str, error: str, window: TimeWindow | None = None) -> "BroadcastResult":
        return cls(ok=False, window=window, error_kind=error_kind, error=error)

    def to_output(self) -> Dict[str, Any]:
        return {"MessageId": self.message_id if self.ok else None}


class BroadcastError(RuntimeError):
    """Base class for failures while sending a broadcast message."""

    kind = "broadcast"


class AuthenticationError(BroadcastError):
    """Token acquisition failed."""

    kind = "authentication"


class TimeZoneResolutionError(BroadcastError):
    """Timezone name is not known to the host timezone database."""

    kind = "timezone"

    def __init__(self, timezone_name: str) -> None:
        super().__init__(f"Time zone not found: {timezone_name!r}")
        self.timezone_name = timezone_name


class SendError(BroadcastError):
    """The AddMessage request failed."""

    kind = "send"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TimeWindowError(BroadcastError):
    """Start or end time falls outside the representable date range."""

    kind = "window"
