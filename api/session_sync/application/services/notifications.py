"""
Canal explícito de notificaciones de dominio para sesiones.

Reemplaza al bus de eventos global del host: los observadores (sync de
calendario, etc.) se suscriben a una instancia concreta.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, List

from loguru import logger

from session_sync.domain.entities.event_session import EventSession


@dataclass(frozen=True)
class SessionEvent:
    """Evento con el snapshot normalizado completo de la sesión."""

    name: ClassVar[str] = "session_event"
    session: EventSession

    def payload(self) -> Dict[str, Any]:
        """Datos que reciben los observadores de calendario."""
        s = self.session
        return {
            "id": s.id,
            "sourceid": s.source_id,
            "sourcestatus": s.source_status,
            "sourceeventid": s.source_event_id,
            "sourceeventguid": s.source_event_guid,
            "startdatetime": s.start_datetime,
            "finishdatetime": s.finish_datetime,
            "platform": s.platform,
            "name": s.name,
            "description": s.description,
        }


@dataclass(frozen=True)
class SessionCreated(SessionEvent):
    name: ClassVar[str] = "session_created"


@dataclass(frozen=True)
class SessionUpdated(SessionEvent):
    name: ClassVar[str] = "session_updated"


SessionEventHandler = Callable[[SessionEvent], None]


class SessionNotifier:
    """Lista de suscriptores que reciben cada evento en orden de suscripción."""

    def __init__(self) -> None:
        self._handlers: List[SessionEventHandler] = []

    def subscribe(self, handler: SessionEventHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: SessionEventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def publish(self, event: SessionEvent) -> int:
        """
        Entrega el evento a todos los suscriptores.

        Un suscriptor que falla se registra en el log y no impide la entrega
        al resto (la escritura ya está confirmada).

        Returns:
            int: Cantidad de suscriptores que lo procesaron sin error
        """
        delivered = 0
        for handler in list(self._handlers):
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception(
                    f"Suscriptor {getattr(handler, '__name__', handler)!s} falló procesando "
                    f"{event.name} de la sesión {event.session.source_id}"
                )
        return delivered
