from __future__ import annotations

from fakes import make_session
from session_sync.application.services.notifications import (
    SessionCreated,
    SessionNotifier,
    SessionUpdated,
)


def test_payload_carries_calendar_fields() -> None:
    event = SessionCreated(make_session(10, id=3))
    assert event.name == "session_created"
    assert event.payload() == {
        "id": 3,
        "sourceid": 10,
        "sourcestatus": "Active",
        "sourceeventid": 77,
        "sourceeventguid": "guid-77",
        "startdatetime": "2024-04-01T09:00:00+10:00",
        "finishdatetime": "2024-04-01T17:00:00+10:00",
        "platform": "acme.arlo.co",
        "name": "Sesión",
        "description": "Descripción",
    }
    assert SessionUpdated(make_session()).name == "session_updated"


def test_failing_subscriber_does_not_block_the_rest(captured_logs) -> None:
    notifier = SessionNotifier()
    received = []

    def broken(event) -> None:
        raise RuntimeError("calendar down")

    notifier.subscribe(broken)
    notifier.subscribe(received.append)

    delivered = notifier.publish(SessionCreated(make_session()))

    assert delivered == 1
    assert len(received) == 1
    assert any("broken" in m for m in captured_logs)


def test_subscribe_is_idempotent_and_unsubscribe_stops_delivery() -> None:
    notifier = SessionNotifier()
    received = []
    notifier.subscribe(received.append)
    notifier.subscribe(received.append)

    notifier.publish(SessionCreated(make_session()))
    assert len(received) == 1

    notifier.unsubscribe(received.append)
    assert notifier.publish(SessionCreated(make_session())) == 0
    assert len(received) == 1
