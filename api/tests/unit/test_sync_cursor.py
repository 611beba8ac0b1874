from __future__ import annotations

import pytest

from session_sync.domain.entities.sync_cursor import SyncCursor, SyncJobKey
from session_sync.shared.constants.session_constants import EPOCH_WATERMARK
from session_sync.shared.exceptions.sync import CursorRegressionError

KEY = SyncJobKey(area="enrolment", type="event_sessions", endpoint="eventsessions/")


def test_empty_cursor_uses_epoch_watermark_and_accepts_everything() -> None:
    cursor = SyncCursor(job_key=KEY)
    assert cursor.watermark == EPOCH_WATERMARK
    assert cursor.position() is None
    assert cursor.is_before("1999-01-01T00:00:00Z", 1)


def test_is_before_breaks_ties_by_source_id() -> None:
    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00Z", last_source_id=5)
    assert not cursor.is_before("2024-03-01T10:00:00Z", 5)
    assert not cursor.is_before("2024-03-01T10:00:00Z", 4)
    assert cursor.is_before("2024-03-01T10:00:00Z", 7)
    assert cursor.is_before("2024-03-01T10:00:01Z", 1)


def test_zero_is_a_real_tie_break_id() -> None:
    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00Z", last_source_id=0)
    assert not cursor.is_before("2024-03-01T10:00:00Z", 0)
    assert cursor.is_before("2024-03-01T10:00:00Z", 1)


def test_watermark_without_id_counts_as_fully_processed() -> None:
    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00Z")
    assert not cursor.is_before("2024-03-01T10:00:00Z", 999)
    assert cursor.is_before("2024-03-01T10:00:00.001Z", 1)


def test_ordering_compares_instants_not_strings() -> None:
    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T12:00:00+02:00", last_source_id=3)
    # 10:30Z es posterior a 12:00+02:00 (= 10:00Z) aunque el string sea "menor"
    assert cursor.is_before("2024-03-01T10:30:00Z", 1)
    # Dígitos fraccionales más allá del microsegundo también ordenan
    precise = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00.1234567Z", last_source_id=3)
    assert precise.is_before("2024-03-01T10:00:00.1234568Z", 1)


def test_advance_moves_forward_and_keeps_raw_watermark() -> None:
    cursor = SyncCursor(job_key=KEY).advance("2024-03-01T10:00:00.120Z", 7)
    assert cursor.last_source_time_modified == "2024-03-01T10:00:00.120Z"
    assert cursor.last_source_id == 7

    same = cursor.advance("2024-03-01T10:00:00.120Z", 7)
    assert same == cursor


def test_advance_refuses_to_move_backward() -> None:
    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00Z", last_source_id=7)
    with pytest.raises(CursorRegressionError):
        cursor.advance("2024-03-01T10:00:00Z", 5)
    with pytest.raises(CursorRegressionError):
        cursor.advance("2024-02-29T10:00:00Z", 99)


def test_touch_does_not_change_position() -> None:
    from datetime import datetime, timezone

    cursor = SyncCursor(job_key=KEY, last_source_time_modified="2024-03-01T10:00:00Z", last_source_id=7)
    touched = cursor.touch(datetime(2024, 3, 2, tzinfo=timezone.utc))
    assert touched.position() == cursor.position()
    assert touched.time_last_request == datetime(2024, 3, 2, tzinfo=timezone.utc)
