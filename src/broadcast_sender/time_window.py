"""Broadcast time window calculation.

The window is computed on host local wall-clock time: minutes are added to
the local start value first, then both boundaries are converted into the
target zone and formatted without an offset.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .types import TimeWindow, TimeWindowError, TimeZoneResolutionError

SORTABLE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_START_TIME_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
)


def resolve_timezone(timezone_name: str) -> ZoneInfo:
    name = (timezone_name or "").strip()
    if not name:
        raise TimeZoneResolutionError(timezone_name)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise TimeZoneResolutionError(timezone_name) from exc


def parse_start_time(text: str) -> datetime:
    """Parses a local start time; the result is naive (host wall-clock)."""
    for fmt in _START_TIME_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt)
        except ValueError:
            continue
    raise ValueError("Expected start time format: YYYY-MM-DD HH:MM[:SS]")


def format_sortable(value: datetime) -> str:
    return value.strftime(SORTABLE_FORMAT)


def _localize(value: datetime, local_tz: tzinfo | None) -> datetime:
    # A naive datetime passed to astimezone() is taken as system local time.
    if local_tz is None:
        return value.astimezone()
    return value.replace(tzinfo=local_tz)


def _to_local_wall_clock(value: datetime, local_tz: tzinfo | None) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(local_tz).replace(tzinfo=None)


def compute_time_window(
    timezone_name: str = "UTC",
    start_time: datetime | None = None,
    ending_in_minutes: int = 60,
    *,
    local_tz: tzinfo | None = None,
    now: Callable[[], datetime] | None = None,
) -> TimeWindow:
    """Returns the broadcast window expressed as wall-clock time in ``timezone_name``.

    ``local_tz`` is the zone of the host clock; ``None`` uses the system
    local zone. ``now`` supplies the default start time.
    """
    target_tz = resolve_timezone(timezone_name)

    if start_time is None:
        start_time = now() if now is not None else datetime.now(local_tz)
    try:
        start_local = _to_local_wall_clock(start_time, local_tz)
        end_local = start_local + timedelta(minutes=ending_in_minutes)

        start_target = _localize(start_local, local_tz).astimezone(target_tz)
        end_target = _localize(end_local, local_tz).astimezone(target_tz)
    except (OverflowError, ValueError, OSError) as exc:
        raise TimeWindowError(
            f"Window of {ending_in_minutes} minute(s) from {start_time} is out of range: {exc}"
        ) from exc

    return TimeWindow(
        start=format_sortable(start_target),
        end=format_sortable(end_target),
        timezone=target_tz.key,
    )
