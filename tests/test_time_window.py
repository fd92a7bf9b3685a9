from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from broadcast_sender.time_window import compute_time_window, parse_start_time, resolve_timezone
from broadcast_sender.types import TimeWindowError, TimeZoneResolutionError

UTC = ZoneInfo("UTC")


def test_utc_window_for_fixed_start():
    window = compute_time_window("UTC", datetime(2024, 1, 15, 10, 0), 60, local_tz=UTC)

    assert window.start == "2024-01-15T10:00:00"
    assert window.end == "2024-01-15T11:00:00"
    assert window.timezone == "UTC"


def test_zero_minutes_gives_equal_boundaries():
    window = compute_time_window("UTC", datetime(2024, 1, 15, 10, 0), 0, local_tz=UTC)
    assert window.start == window.end == "2024-01-15T10:00:00"


def test_negative_minutes_pass_through():
    window = compute_time_window("UTC", datetime(2024, 1, 15, 10, 0), -30, local_tz=UTC)
    assert window.end == "2024-01-15T09:30:00"
    assert window.end < window.start


def test_local_time_converted_into_target_zone():
    window = compute_time_window(
        "UTC",
        datetime(2024, 1, 15, 10, 0),
        90,
        local_tz=ZoneInfo("Europe/Oslo"),
    )
    assert window.start == "2024-01-15T09:00:00"
    assert window.end == "2024-01-15T10:30:00"


def test_minutes_added_before_conversion_across_dst_change():
    # 06:30 UTC is 01:30 EST; one hour later New York is already on EDT.
    window = compute_time_window(
        "America/New_York",
        datetime(2024, 3, 10, 6, 30),
        60,
        local_tz=UTC,
    )
    assert window.start == "2024-03-10T01:30:00"
    assert window.end == "2024-03-10T03:30:00"


def test_conversion_is_deterministic():
    start = datetime(2024, 6, 1, 12, 0)
    first = compute_time_window("Asia/Tokyo", start, 15, local_tz=UTC)
    second = compute_time_window("Asia/Tokyo", start, 15, local_tz=UTC)

    assert first == second
    assert first.start == "2024-06-01T21:00:00"


def test_default_start_uses_injected_clock():
    window = compute_time_window(local_tz=UTC, now=lambda: datetime(2024, 1, 15, 10, 0, 42))
    assert window.start == "2024-01-15T10:00:42"
    assert window.end == "2024-01-15T11:00:42"


def test_aware_start_time_is_read_as_local_wall_clock():
    start = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    window = compute_time_window("UTC", start, 60, local_tz=ZoneInfo("Europe/Oslo"))
    assert window.start == "2024-01-15T10:00:00"
    assert window.end == "2024-01-15T11:00:00"


@pytest.mark.parametrize("name", ["Not/AZone", "", "   ", "../etc/passwd", "America", "A" * 5000])
def test_unknown_timezone_raises(name):
    with pytest.raises(TimeZoneResolutionError) as exc_info:
        compute_time_window(name, datetime(2024, 1, 15, 10, 0), 60, local_tz=UTC)
    assert exc_info.value.timezone_name == name


def test_resolve_timezone_strips_whitespace():
    assert resolve_timezone(" Europe/Oslo ").key == "Europe/Oslo"


def test_parse_start_time_formats():
    assert parse_start_time("2024-01-15 10:30") == datetime(2024, 1, 15, 10, 30)
    assert parse_start_time("2024-01-15T10:30:15") == datetime(2024, 1, 15, 10, 30, 15)
    with pytest.raises(ValueError):
        parse_start_time("15/01/2024 10:30")


def test_huge_duration_raises_time_window_error():
    with pytest.raises(TimeWindowError):
        compute_time_window("UTC", datetime(2024, 1, 15, 10, 0), 10**12, local_tz=UTC)


def test_conversion_past_last_representable_date_raises_time_window_error():
    with pytest.raises(TimeWindowError):
        compute_time_window("Asia/Tokyo", datetime(9999, 12, 31, 23, 0), 0, local_tz=UTC)
