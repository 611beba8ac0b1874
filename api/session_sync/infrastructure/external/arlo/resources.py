"""
Parseo del formato de cable de la API de Arlo (JSON).

Colección:
    {"Items": [...], "Link": [{"rel": "next", "href": "..."}]}

Cada item es un EventSession; el Event padre viaja expandido dentro de
`Link[*].Expansion` del link cuyo `rel` termina en `/Event`.

Se mantiene libre de I/O para poder testearlo fácilmente.
"""

from __future__ import annotations

from typing import Any, Optional

from session_sync.domain.entities.event_session import RemoteEvent, RemoteSessionRecord, SessionPage
from session_sync.shared.exceptions.sync import ProtocolError
from session_sync.shared.utils.datetime_utils import source_time_key


def _links(node: dict[str, Any]) -> list[dict[str, Any]]:
    links = node.get("Link") or []
    if isinstance(links, dict):
        # Con un único link algunos serializadores no generan lista
        links = [links]
    if not isinstance(links, list):
        raise ProtocolError(f"'Link' con forma inesperada: {type(links).__name__}")
    return [link for link in links if isinstance(link, dict)]


def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ProtocolError(f"'{field_name}' no es un entero: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"'{field_name}' no es un entero: {value!r}") from e


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_event(node: dict[str, Any]) -> RemoteEvent:
    """Parsea el Event padre expandido."""
    if "EventID" not in node or node.get("EventID") is None:
        raise ProtocolError("El evento expandido no contiene 'EventID'")
    return RemoteEvent(
        event_id=_as_int(node["EventID"], "EventID"),
        unique_identifier=_optional_str(node.get("UniqueIdentifier")) or "",
        code=_optional_str(node.get("Code")),
        name=_optional_str(node.get("Name")),
    )


def _expanded_event(item: dict[str, Any]) -> Optional[RemoteEvent]:
    for link in _links(item):
        rel = str(link.get("rel") or "")
        if rel.endswith("/Event") and isinstance(link.get("Expansion"), dict):
            return parse_event(link["Expansion"])
    return None


def parse_event_session(item: Any) -> RemoteSessionRecord:
    """
    Parsea un EventSession.

    Raises:
        ProtocolError: si falta SessionID / LastModifiedDateTime o el timestamp
            no se puede interpretar
    """
    if not isinstance(item, dict):
        raise ProtocolError(f"Item de sesión con forma inesperada: {type(item).__name__}")
    if item.get("SessionID") is None:
        # Caso raro; preferimos fallar temprano y visible.
        raise ProtocolError("La API devolvió una sesión sin 'SessionID'")

    session_id = _as_int(item["SessionID"], "SessionID")
    last_modified = item.get("LastModifiedDateTime")
    if not last_modified:
        raise ProtocolError(f"La sesión {session_id} no contiene 'LastModifiedDateTime'")
    try:
        source_time_key(str(last_modified))
    except ValueError as e:
        raise ProtocolError(
            f"No se pudo parsear 'LastModifiedDateTime' de la sesión {session_id}: {last_modified}"
        ) from e

    return RemoteSessionRecord(
        session_id=session_id,
        last_modified_datetime=str(last_modified),
        name=_optional_str(item.get("Name")),
        description=_optional_str(item.get("Description")),
        start_datetime=_optional_str(item.get("StartDateTime")),
        finish_datetime=_optional_str(item.get("FinishDateTime")),
        start_timezone_abbr=_optional_str(item.get("StartTimeZoneAbbr")),
        finish_timezone_abbr=_optional_str(item.get("FinishTimeZoneAbbr")),
        session_type=_optional_str(item.get("SessionType")),
        status=_optional_str(item.get("Status")),
        created_datetime=_optional_str(item.get("CreatedDateTime")),
        event=_expanded_event(item),
    )


def parse_sessions_collection(payload: Any) -> SessionPage:
    """
    Parsea una colección de sesiones.

    Una colección vacía puede venir sin 'Items'; cualquier otra forma es un
    ProtocolError.
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"Respuesta con forma inesperada: {type(payload).__name__}")

    items = payload.get("Items")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise ProtocolError("'Items' no es una lista")

    records = tuple(parse_event_session(item) for item in items)
    has_more = any(str(link.get("rel") or "").lower() == "next" for link in _links(payload))
    return SessionPage(records=records, has_more=has_more)
