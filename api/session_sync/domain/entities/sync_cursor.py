"""
Entidad de dominio: cursor de sincronización.

Registro durable del progreso de un job (uno por área/tipo/endpoint).
El par (watermark, tie-break id) define una posición dentro del orden remoto
(LastModifiedDateTime ASC, SessionID ASC).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple, Union

from session_sync.shared.constants.session_constants import EPOCH_WATERMARK
from session_sync.shared.exceptions.sync import CursorRegressionError
from session_sync.shared.utils.datetime_utils import SourceTimeKey, source_time_key


@dataclass(frozen=True)
class SyncJobKey:
    """Identifica el cursor de un job."""

    area: str
    type: str
    endpoint: str

    def __str__(self) -> str:
        return f"{self.area}/{self.type}@{self.endpoint}"


@dataclass(frozen=True)
class SyncCursor:
    """
    Posición de sincronización.

    last_source_time_modified:
        LastModifiedDateTime remoto del último registro procesado, tal cual
        llegó de la API. None si el job nunca procesó registros.
    last_source_id:
        SessionID del último registro procesado con ese watermark. None
        significa ausente; 0 es un id válido.
    time_last_request:
        Momento de la última consulta exitosa a la API.
    """

    job_key: SyncJobKey
    last_source_time_modified: Optional[str] = None
    last_source_id: Optional[int] = None
    time_last_request: Optional[datetime] = None

    @property
    def watermark(self) -> str:
        """Watermark efectivo para filtros (epoch si nunca se sincronizó)."""
        return self.last_source_time_modified or EPOCH_WATERMARK

    def position(self) -> Optional[Tuple[SourceTimeKey, Union[int, float]]]:
        """
        Clave ordenable de la posición actual, o None al inicio.

        Sin tie-break id el watermark cuenta como completamente procesado,
        igual que el filtro remoto (solo `gt`).
        """
        if self.last_source_time_modified is None:
            return None
        source_id = self.last_source_id if self.last_source_id is not None else math.inf
        return source_time_key(self.last_source_time_modified), source_id

    def is_before(self, source_time_modified: str, source_id: int) -> bool:
        """True si el registro (modified, id) queda estrictamente después del cursor."""
        current = self.position()
        if current is None:
            return True
        return (source_time_key(source_time_modified), source_id) > current

    def advance(self, source_time_modified: str, source_id: int) -> SyncCursor:
        """
        Retorna un cursor movido al registro indicado.

        Re-procesar el mismo registro deja la posición igual; cualquier
        posición anterior levanta CursorRegressionError.
        """
        current = self.position()
        proposed = (source_time_key(source_time_modified), source_id)
        if current is not None and proposed < current:
            raise CursorRegressionError(
                current=f"{self.last_source_time_modified}#{self.last_source_id}",
                proposed=f"{source_time_modified}#{source_id}",
            )
        return replace(
            self,
            last_source_time_modified=source_time_modified,
            last_source_id=source_id,
        )

    def touch(self, when: datetime) -> SyncCursor:
        """Registra una consulta exitosa sin mover la posición."""
        return replace(self, time_last_request=when)
