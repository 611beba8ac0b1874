"""
Entidades de dominio para sesiones de eventos.

- RemoteEvent / RemoteSessionRecord: forma remota (solo lectura).
- EventSession: forma local normalizada, espejo de la remota.
- SessionPage: una página de la colección remota.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, tzinfo
from typing import Any, Dict, Optional, Sequence

from session_sync.shared.constants.session_constants import EventSessionStatus
from session_sync.shared.utils.datetime_utils import parse_source_datetime


@dataclass(frozen=True)
class RemoteEvent:
    """Evento padre de una sesión (expandido en la respuesta remota)."""

    event_id: int
    unique_identifier: str
    code: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class RemoteSessionRecord:
    """Registro EventSession tal como lo entrega la API. Timestamps opacos."""

    session_id: int
    last_modified_datetime: str
    name: Optional[str] = None
    description: Optional[str] = None
    start_datetime: Optional[str] = None
    finish_datetime: Optional[str] = None
    start_timezone_abbr: Optional[str] = None
    finish_timezone_abbr: Optional[str] = None
    session_type: Optional[str] = None
    status: Optional[str] = None
    created_datetime: Optional[str] = None
    event: Optional[RemoteEvent] = None


@dataclass(frozen=True)
class SessionPage:
    """Página de la colección remota, ya ordenada por la API."""

    records: Sequence[RemoteSessionRecord] = field(default_factory=tuple)
    has_more: bool = False


@dataclass(frozen=True)
class EventSession:
    """
    Sesión local normalizada.

    `id` lo asigna el almacenamiento; el resto de los campos refleja la
    sesión remota y participa en la detección de cambios.
    """

    source_id: int
    platform: str
    name: str
    description: str
    start_datetime: str
    finish_datetime: str
    start_timezone_abbr: Optional[str]
    finish_timezone_abbr: Optional[str]
    session_type: str
    source_status: str
    source_created: Optional[str]
    source_modified: Optional[str]
    source_event_id: int
    source_event_guid: str
    id: Optional[int] = None

    def comparable_fields(self) -> Dict[str, Any]:
        """Conjunto normalizado de campos (todo excepto el id local)."""
        data = asdict(self)
        data.pop("id")
        return data

    def snapshot(self) -> Dict[str, Any]:
        """Snapshot completo, incluido el id local."""
        return asdict(self)

    def time_norequests_after(self, now: datetime, local_tz: Optional[tzinfo] = None) -> datetime:
        """
        Hasta cuándo tiene sentido seguir consultando esta sesión.

        Para una sesión activa que termina en el futuro es su fin; en cualquier
        otro caso, `now`. Un fin sin offset se interpreta en `local_tz` (la zona
        configurada de la plataforma; UTC si no se indica).
        """
        if self.source_status == EventSessionStatus.ACTIVE.value and self.finish_datetime:
            try:
                finish = parse_source_datetime(self.finish_datetime, local_tz)
            except ValueError:
                return now
            if finish > now:
                return finish
        return now
