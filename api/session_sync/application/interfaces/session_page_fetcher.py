"""
Interfaz para obtener páginas de sesiones desde la API remota.

Este contrato existe para:
- Que el orquestador no dependa de requests ni del formato de cable.
- Facilitar tests unitarios con páginas en memoria.
"""

from __future__ import annotations

from typing import Protocol

from session_sync.domain.entities.event_session import SessionPage
from session_sync.domain.entities.sync_cursor import SyncCursor


class SessionPageFetcher(Protocol):
    """
    Trae la página siguiente a la posición del cursor.

    Implementaciones:
    - ArloClient (HTTP).
    - Fakes para tests.

    Errores:
    - TransportError ante fallas de red/HTTP.
    - ProtocolError ante cuerpos malformados.
    """

    def fetch_sessions_page(self, cursor: SyncCursor) -> SessionPage:
        ...
