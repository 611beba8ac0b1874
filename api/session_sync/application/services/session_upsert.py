"""
Motor de upsert de sesiones.

Busca por id externo, inserta si no existe y actualiza solo si algún campo
normalizado cambió. Re-procesar el mismo registro no escribe ni notifica.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from loguru import logger

from session_sync.application.services.notifications import (
    SessionCreated,
    SessionEvent,
    SessionNotifier,
    SessionUpdated,
)
from session_sync.domain.entities.event_session import EventSession
from session_sync.domain.repositories.session_sync_repository import ISessionSyncRepository


@dataclass(frozen=True)
class UpsertResult:
    session: EventSession
    was_created: bool
    changed: bool

    @property
    def event(self) -> Optional[SessionEvent]:
        """Evento que corresponde publicar, si hubo cambio real."""
        if self.was_created:
            return SessionCreated(self.session)
        if self.changed:
            return SessionUpdated(self.session)
        return None


class SessionUpsertEngine:
    def __init__(self, repository: ISessionSyncRepository, notifier: SessionNotifier) -> None:
        self._repo = repository
        self._notifier = notifier

    def apply(self, session: EventSession) -> UpsertResult:
        """
        Escribe sin notificar. El orquestador lo usa dentro de la transacción
        y notifica después del commit.

        Raises:
            ConstraintError: si el almacenamiento rechaza la escritura
        """
        existing = self._repo.find_by_source_id(session.source_id)
        if existing is None:
            created = self._repo.insert(session)
            logger.debug(f"Sesión {session.source_id} creada (id={created.id})")
            return UpsertResult(session=created, was_created=True, changed=True)

        if existing.comparable_fields() == session.comparable_fields():
            return UpsertResult(session=existing, was_created=False, changed=False)

        updated = self._repo.update(replace(session, id=existing.id))
        logger.debug(f"Sesión {session.source_id} actualizada (id={updated.id})")
        return UpsertResult(session=updated, was_created=False, changed=True)

    def notify(self, result: UpsertResult) -> None:
        event = result.event
        if event is not None:
            self._notifier.publish(event)

    def upsert(self, session: EventSession) -> UpsertResult:
        """Escribe y, si hubo creación o cambio, emite exactamente un evento."""
        result = self.apply(session)
        self.notify(result)
        return result
