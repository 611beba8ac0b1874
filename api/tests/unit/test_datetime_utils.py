from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from session_sync.shared.utils.datetime_utils import ensure_utc, parse_source_datetime, source_time_key


def test_source_time_key_normalizes_offsets_to_utc() -> None:
    assert source_time_key("2024-03-01T12:00:00+02:00") == source_time_key("2024-03-01T10:00:00Z")
    assert source_time_key("2024-03-01T10:00:00") == source_time_key("2024-03-01T10:00:00Z")


def test_source_time_key_keeps_sub_microsecond_precision() -> None:
    assert source_time_key("2024-03-01T10:00:00.1234567Z") < source_time_key("2024-03-01T10:00:00.1234568Z")
    assert source_time_key("2024-03-01T10:00:00.5Z") == source_time_key("2024-03-01T10:00:00.500Z")


@pytest.mark.parametrize("value", ["", "yesterday", "2024-03-01", "2024-03-01 10:00:00Z"])
def test_source_time_key_rejects_unsupported_formats(value: str) -> None:
    with pytest.raises(ValueError):
        source_time_key(value)


def test_parse_source_datetime_returns_aware_utc() -> None:
    dt = parse_source_datetime("2024-03-01T09:30:00.250-03:00")
    assert dt == datetime(2024, 3, 1, 12, 30, 0, 250000, tzinfo=timezone.utc)


def test_ensure_utc_treats_naive_as_utc() -> None:
    assert ensure_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc


def test_naive_timestamp_uses_given_default_zone() -> None:
    tz = timezone(timedelta(hours=-3))
    assert parse_source_datetime("2024-03-01T09:00:00", tz) == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
    # Un offset explícito gana sobre la zona por defecto
    assert parse_source_datetime("2024-03-01T09:00:00Z", tz) == datetime(2024, 3, 1, 9, tzinfo=timezone.utc)
