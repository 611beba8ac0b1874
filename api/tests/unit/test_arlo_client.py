"""
Tests del cliente HTTP de Arlo con una sesión de requests simulada.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from session_sync.domain.entities.sync_cursor import SyncCursor, SyncJobKey
from session_sync.infrastructure.external.arlo.client import ArloClient, ArloCredentials
from session_sync.shared.exceptions.sync import ProtocolError, TransportError

KEY = SyncJobKey(area="enrolment", type="event_sessions", endpoint="eventsessions/")


def _response(status_code: int = 200, payload=None, headers=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def _item(session_id: int, modified: str = "2024-03-01T10:00:00Z") -> dict:
    return {
        "SessionID": session_id,
        "LastModifiedDateTime": modified,
        "Name": f"Sesión {session_id}",
        "StartDateTime": "2024-04-01T09:00:00+10:00",
        "FinishDateTime": "2024-04-01T17:00:00+10:00",
        "SessionType": "Venue",
        "Status": "Active",
        "Link": [
            {
                "rel": "http://schemas.arlo.co/api/2012/02/auth/related/Event",
                "href": "https://acme.arlo.co/api/2012-02-01/auth/resources/events/77/",
                "Expansion": {"EventID": 77, "UniqueIdentifier": "guid-77", "Code": "EVT-100"},
            }
        ],
    }


def _client(*responses, max_retries: int = 2):
    session = MagicMock()
    session.request.side_effect = list(responses)
    sleeps: list[float] = []
    client = ArloClient(
        ArloCredentials("acme.arlo.co", "user", "secret"),
        session=session,
        max_retries=max_retries,
        sleep=sleeps.append,
    )
    return client, session, sleeps


def test_fetch_sessions_page_parses_items_and_next_link() -> None:
    payload = {
        "Items": [_item(5), _item(7)],
        "Link": [{"rel": "next", "href": "https://acme.arlo.co/...?skip=2"}],
    }
    client, session, _ = _client(_response(payload=payload))

    page = client.fetch_sessions_page(SyncCursor(job_key=KEY, last_source_time_modified="2024-01-01T00:00:00Z"))

    assert [r.session_id for r in page.records] == [5, 7]
    assert page.has_more is True
    assert page.records[0].event.unique_identifier == "guid-77"

    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["auth"] == ("user", "secret")
    assert kwargs["headers"]["Accept"] == "application/json"
    assert kwargs["params"]["$filter"] == "(LastModifiedDateTime gt datetime('2024-01-01T00:00:00Z'))"


def test_last_page_has_no_more() -> None:
    client, _, _ = _client(_response(payload={"Items": [_item(5)]}))
    assert client.fetch_sessions_page(SyncCursor(job_key=KEY)).has_more is False


def test_rate_limit_honors_retry_after_then_succeeds() -> None:
    client, session, sleeps = _client(
        _response(429, headers={"Retry-After": "3"}),
        _response(503),
        _response(payload={"Items": []}),
    )

    page = client.fetch_sessions_page(SyncCursor(job_key=KEY))

    assert page.records == ()
    assert session.request.call_count == 3
    assert sleeps[0] == 3.0
    assert len(sleeps) == 2


def test_server_errors_exhaust_retries_as_transport_error() -> None:
    client, session, _ = _client(_response(500), _response(500), _response(502, text="bad gateway"))

    with pytest.raises(TransportError) as exc_info:
        client.fetch_sessions_page(SyncCursor(job_key=KEY))

    assert exc_info.value.http_status == 502
    assert session.request.call_count == 3


def test_client_error_is_not_retried() -> None:
    client, session, sleeps = _client(_response(401, text="unauthorized"))

    with pytest.raises(TransportError) as exc_info:
        client.fetch_sessions_page(SyncCursor(job_key=KEY))

    assert exc_info.value.http_status == 401
    assert session.request.call_count == 1
    assert sleeps == []


def test_connection_errors_become_transport_error() -> None:
    client, session, sleeps = _client(
        requests.ConnectionError("reset"),
        requests.Timeout("slow"),
        requests.ConnectionError("reset"),
    )

    with pytest.raises(TransportError):
        client.fetch_sessions_page(SyncCursor(job_key=KEY))

    assert session.request.call_count == 3
    assert len(sleeps) == 2


def test_non_json_body_is_protocol_error() -> None:
    client, _, _ = _client(_response(payload=ValueError("no json")))

    with pytest.raises(ProtocolError):
        client.fetch_sessions_page(SyncCursor(job_key=KEY))


def test_item_without_session_id_is_protocol_error() -> None:
    item = _item(5)
    del item["SessionID"]
    client, _, _ = _client(_response(payload={"Items": [item]}))

    with pytest.raises(ProtocolError):
        client.fetch_sessions_page(SyncCursor(job_key=KEY))
