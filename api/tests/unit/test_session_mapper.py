"""
Tests del mapeo remoto -> local (reglas de null/fallback y validación).
"""
from __future__ import annotations

import pytest

from fakes import make_record
from session_sync.application.services.session_mapper import (
    build_session_fields,
    map_remote_session,
    validate_session,
)
from session_sync.shared.exceptions.sync import ValidationError

PLATFORM = "acme.arlo.co"


def test_missing_name_falls_back_to_event_code() -> None:
    session = map_remote_session(make_record(1, name=None), platform=PLATFORM)
    assert session.name == "EVT-100"


def test_missing_name_and_code_falls_back_to_event_name() -> None:
    session = map_remote_session(make_record(1, name=None, event_code=None), platform=PLATFORM)
    assert session.name == "Evento 77"


def test_missing_description_becomes_empty_string() -> None:
    session = map_remote_session(make_record(1, description=None), platform=PLATFORM)
    assert session.description == ""


def test_fields_pass_through_verbatim() -> None:
    record = make_record(9, modified="2024-03-01T10:00:00.1234567Z")
    session = map_remote_session(record, platform=PLATFORM)

    assert session.id is None
    assert session.source_id == 9
    assert session.platform == PLATFORM
    assert session.start_datetime == "2024-04-01T09:00:00+10:00"
    assert session.finish_timezone_abbr == "AEST"
    assert session.source_status == "Active"
    assert session.source_modified == "2024-03-01T10:00:00.1234567Z"
    assert session.source_event_id == 77
    assert session.source_event_guid == "guid-77"


def test_validation_rejects_session_without_event() -> None:
    with pytest.raises(ValidationError) as exc_info:
        map_remote_session(make_record(3, with_event=False), platform=PLATFORM)
    # El nombre propio está presente; falla la referencia al evento
    assert exc_info.value.field == "source_event_id"
    assert exc_info.value.source_id == 3


def test_validation_rejects_missing_name_without_fallback() -> None:
    with pytest.raises(ValidationError) as exc_info:
        map_remote_session(make_record(3, name=None, with_event=False), platform=PLATFORM)
    assert exc_info.value.field == "name"


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("name", "x" * 256),
        ("name", "   "),
        ("platform", ""),
        ("start_datetime", None),
        ("finish_datetime", ""),
        ("session_type", "Hybrid"),
        ("source_status", "Archived"),
        ("source_event_guid", ""),
    ],
)
def test_validation_rejects_invalid_fields(field: str, value) -> None:
    fields = build_session_fields(make_record(4), platform=PLATFORM)
    fields[field] = value
    with pytest.raises(ValidationError):
        validate_session(fields)


def test_negative_source_id_is_invalid() -> None:
    fields = build_session_fields(make_record(4), platform=PLATFORM)
    fields["source_id"] = -1
    with pytest.raises(ValidationError) as exc_info:
        validate_session(fields)
    assert exc_info.value.field == "source_id"


def test_name_at_max_length_is_accepted() -> None:
    fields = build_session_fields(make_record(4, name="x" * 255), platform=PLATFORM)
    assert validate_session(fields).name == "x" * 255
