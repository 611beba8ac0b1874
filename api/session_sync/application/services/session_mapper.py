"""
Mapeo de sesiones remotas a la forma local normalizada.

Funciones puras (sin I/O) para poder testearlas de forma aislada:
- build_session_fields: aplica las reglas de null/fallback de la fuente.
- validate_session: valida los campos y construye la entidad.
- map_remote_session: ambas en secuencia.
"""

from __future__ import annotations

from typing import Any, Dict

from session_sync.domain.entities.event_session import EventSession, RemoteSessionRecord
from session_sync.shared.constants.session_constants import (
    MAX_SESSION_NAME_LENGTH,
    EventSessionStatus,
    EventSessionType,
)
from session_sync.shared.exceptions.sync import ValidationError

_SESSION_TYPES = {t.value for t in EventSessionType}
_SESSION_STATUSES = {s.value for s in EventSessionStatus}


def build_session_fields(remote: RemoteSessionRecord, *, platform: str) -> Dict[str, Any]:
    """
    Traduce un registro remoto a campos locales.

    Reglas:
    - Sin Name: se usa el Code del evento padre (eventos sin sesiones o de una
      sola sesión no traen nombre propio); si tampoco hay Code, el Name del evento.
    - Sin Description: string vacío.
    - Timestamps, zonas horarias y estado pasan tal cual.
    """
    event = remote.event

    name = remote.name
    if name is None and event is not None:
        name = event.code if event.code is not None else event.name

    return {
        "source_id": remote.session_id,
        "platform": platform,
        "name": name,
        "description": remote.description if remote.description is not None else "",
        "start_datetime": remote.start_datetime,
        "finish_datetime": remote.finish_datetime,
        "start_timezone_abbr": remote.start_timezone_abbr,
        "finish_timezone_abbr": remote.finish_timezone_abbr,
        "session_type": remote.session_type,
        "source_status": remote.status,
        "source_created": remote.created_datetime,
        "source_modified": remote.last_modified_datetime,
        "source_event_id": event.event_id if event is not None else None,
        "source_event_guid": event.unique_identifier if event is not None else None,
    }


def validate_session(fields: Dict[str, Any]) -> EventSession:
    """
    Valida campos mapeados y construye la entidad local.

    Raises:
        ValidationError: con el primer campo que no cumple
    """
    source_id = fields.get("source_id")
    if not isinstance(source_id, int) or isinstance(source_id, bool) or source_id < 0:
        raise ValidationError(f"source_id inválido: {source_id!r}", field="source_id")

    def fail(field: str, message: str) -> None:
        raise ValidationError(message, field=field, source_id=source_id)

    if not fields.get("platform"):
        fail("platform", "La sesión no tiene plataforma asociada")

    name = fields.get("name")
    if not isinstance(name, str) or not name.strip():
        fail("name", f"La sesión {source_id} no tiene nombre ni código de evento")
    if len(name) > MAX_SESSION_NAME_LENGTH:
        fail("name", f"Nombre de la sesión {source_id} supera {MAX_SESSION_NAME_LENGTH} caracteres")

    for required in ("start_datetime", "finish_datetime"):
        if not fields.get(required):
            fail(required, f"La sesión {source_id} no trae {required}")

    if fields.get("session_type") not in _SESSION_TYPES:
        fail("session_type", f"SessionType desconocido: {fields.get('session_type')!r}")
    if fields.get("source_status") not in _SESSION_STATUSES:
        fail("source_status", f"Status desconocido: {fields.get('source_status')!r}")

    if fields.get("source_event_id") is None or not fields.get("source_event_guid"):
        fail("source_event_id", f"La sesión {source_id} no referencia a su evento")

    return EventSession(**fields)


def map_remote_session(remote: RemoteSessionRecord, *, platform: str) -> EventSession:
    """Mapea y valida un registro remoto."""
    return validate_session(build_session_fields(remote, platform=platform))
