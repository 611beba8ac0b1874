"""
Interfaz del repositorio de sincronización de sesiones.
Define el contrato que el motor de sync necesita del almacenamiento.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional

from session_sync.domain.entities.event_session import EventSession
from session_sync.domain.entities.sync_cursor import SyncCursor, SyncJobKey


class ISessionSyncRepository(ABC):
    """
    Operaciones de persistencia para sesiones y cursor.

    Las escrituras que el llamador agrupa dentro de `transaction()` se
    confirman juntas o no se confirman.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """
        Abre una unidad de trabajo durable.

        Confirma al salir sin error; ante una excepción hace rollback y la
        propaga.
        """

    @abstractmethod
    def find_by_source_id(self, source_id: int) -> Optional[EventSession]:
        """
        Busca una sesión por su id externo.

        Args:
            source_id: SessionID remoto

        Returns:
            Optional[EventSession]: Sesión encontrada o None
        """

    @abstractmethod
    def insert(self, session: EventSession) -> EventSession:
        """
        Inserta una sesión nueva.

        Returns:
            EventSession: Sesión con id local asignado

        Raises:
            ConstraintError: si el almacenamiento rechaza la escritura
        """

    @abstractmethod
    def update(self, session: EventSession) -> EventSession:
        """
        Actualiza una sesión existente (se localiza por su id local).

        Raises:
            ConstraintError: si el almacenamiento rechaza la escritura
        """

    @abstractmethod
    def load_cursor(self, job_key: SyncJobKey) -> SyncCursor:
        """Carga el cursor del job; si no existe, retorna uno vacío."""

    @abstractmethod
    def save_cursor(self, cursor: SyncCursor) -> None:
        """Persiste el cursor (durable una vez confirmada la transacción)."""
