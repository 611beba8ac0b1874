"""
Orquestador de la sincronización incremental de sesiones.

Flujo (resumen):
- Carga el cursor del job.
- Pide la página siguiente a la posición de lectura (filtro + orden compuesto).
- Por cada registro, en orden (modified, id): mapea, valida, upsert y avanza
  el cursor en la misma transacción.
- Publica la notificación después del commit.
- Termina cuando la API indica que no hay más páginas.

Política de errores:
- TransportError / ProtocolError al pedir página: aborta, cursor intacto.
- ConstraintError / ValidationError de un registro: se omite, se reporta y
  se continúa. El cursor durable no avanza por ese registro, la posición de
  lectura sí (no se vuelve a pedir en la misma corrida).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from session_sync.application.interfaces.session_page_fetcher import SessionPageFetcher
from session_sync.application.services.session_mapper import map_remote_session
from session_sync.application.services.session_upsert import SessionUpsertEngine, UpsertResult
from session_sync.domain.entities.event_session import RemoteSessionRecord
from session_sync.domain.entities.sync_cursor import SyncCursor, SyncJobKey
from session_sync.domain.repositories.session_sync_repository import ISessionSyncRepository
from session_sync.shared.constants.session_constants import SyncRunStatus, SyncState
from session_sync.shared.exceptions.sync import (
    ConstraintError,
    ProtocolError,
    StalledCursorError,
    SyncError,
    TransportError,
    ValidationError,
)
from session_sync.shared.utils.datetime_utils import source_time_key, utc_now


@dataclass(frozen=True)
class SyncErrorRecord:
    """Error reportado durante una corrida."""

    error_code: str
    message: str
    source_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: SyncError, source_id: Optional[int] = None) -> SyncErrorRecord:
        return cls(
            error_code=exc.error_code,
            message=exc.message,
            source_id=source_id,
            details=dict(exc.details),
        )


@dataclass
class SyncRunReport:
    """Resumen de una corrida, entregado al scheduler/monitoreo al terminar."""

    job_key: SyncJobKey
    status: SyncRunStatus = SyncRunStatus.SUCCESS
    pages_fetched: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    already_synced: int = 0
    skipped: int = 0
    errors: List[SyncErrorRecord] = field(default_factory=list)
    cursor: Optional[SyncCursor] = None

    @property
    def success(self) -> bool:
        return self.status == SyncRunStatus.SUCCESS

    def count(self, result: UpsertResult) -> None:
        if result.was_created:
            self.created += 1
        elif result.changed:
            self.updated += 1
        else:
            self.unchanged += 1

    def error_summary(self, limit: int = 2000) -> Optional[str]:
        """Texto corto con los errores, para persistir junto al estado del job."""
        if not self.errors:
            return None
        lines = [
            f"[{e.error_code}] {e.message}" + (f" (source_id={e.source_id})" if e.source_id is not None else "")
            for e in self.errors
        ]
        return "\n".join(lines)[:limit]


def record_sort_key(record: RemoteSessionRecord):
    return source_time_key(record.last_modified_datetime), record.session_id


class EventSessionsSync:
    """
    Orquestador de una corrida para un job (área/tipo/endpoint).

    Una sola corrida activa por cursor: la exclusión mutua la provee quien
    agenda el job (ver EventSessionsJob).
    """

    def __init__(
        self,
        *,
        repository: ISessionSyncRepository,
        fetcher: SessionPageFetcher,
        upsert_engine: SessionUpsertEngine,
        job_key: SyncJobKey,
        platform: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repository
        self._fetcher = fetcher
        self._upsert = upsert_engine
        self._job_key = job_key
        self._platform = platform
        self._clock = clock
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        return self._state

    def run(self, should_stop: Optional[Callable[[], bool]] = None) -> SyncRunReport:
        """
        Ejecuta una corrida completa.

        Args:
            should_stop: se consulta entre registros; si retorna True la corrida
                termina como `cancelled` con el cursor ya consistente

        Returns:
            SyncRunReport: resultado y errores acumulados
        """
        report = SyncRunReport(job_key=self._job_key)
        self._state = SyncState.IDLE
        cursor = self._repo.load_cursor(self._job_key)
        logger.info(
            f"Sync de sesiones [{self._job_key}] desde cursor "
            f"{cursor.watermark} / id={cursor.last_source_id}"
        )

        # Posición de lectura de esta corrida: avanza también con los registros
        # omitidos, para no volver a pedirlos en la página siguiente. Nunca se persiste.
        position = cursor

        try:
            while True:
                self._state = SyncState.FETCHING_PAGE
                page = self._fetcher.fetch_sessions_page(position)
                report.pages_fetched += 1
                cursor = cursor.touch(self._clock())
                logger.info(
                    f"Página {report.pages_fetched}: {len(page.records)} sesión(es), "
                    f"has_more={page.has_more}"
                )

                page_start = position.position()
                for record in sorted(page.records, key=record_sort_key):
                    if should_stop is not None and should_stop():
                        logger.warning(f"Sync [{self._job_key}] cancelado entre registros")
                        report.status = SyncRunStatus.CANCELLED
                        report.cursor = cursor
                        self._state = SyncState.IDLE
                        return report

                    if not position.is_before(record.last_modified_datetime, record.session_id):
                        report.already_synced += 1
                        continue

                    advanced = self._process_record(record, cursor, report)
                    if advanced is not None:
                        cursor = advanced
                    position = position.advance(record.last_modified_datetime, record.session_id)

                if not page.has_more:
                    break
                if position.position() == page_start:
                    raise StalledCursorError(position.last_source_time_modified, position.last_source_id)

        except (TransportError, ProtocolError) as exc:
            self._state = SyncState.ABORTED
            report.status = SyncRunStatus.ABORTED
            report.errors.append(SyncErrorRecord.from_exception(exc))
            report.cursor = cursor
            logger.error(f"Sync [{self._job_key}] abortado: [{exc.error_code}] {exc.message}")
            return report

        self._repo.save_cursor(cursor)
        report.cursor = cursor
        self._state = SyncState.IDLE
        logger.info(
            f"Sync [{self._job_key}] completado: creadas={report.created}, "
            f"actualizadas={report.updated}, sin_cambios={report.unchanged}, "
            f"omitidas={report.skipped}, cursor={cursor.last_source_time_modified}/{cursor.last_source_id}"
        )
        return report

    def _process_record(
        self,
        record: RemoteSessionRecord,
        cursor: SyncCursor,
        report: SyncRunReport,
    ) -> Optional[SyncCursor]:
        """
        Procesa un registro. Retorna el cursor avanzado y ya confirmado, o
        None si el registro se omitió por error.
        """
        self._state = SyncState.PROCESSING_RECORD
        try:
            session = map_remote_session(record, platform=self._platform)
            with self._repo.transaction():
                result = self._upsert.apply(session)
                self._state = SyncState.ADVANCING_CURSOR
                advanced = cursor.advance(record.last_modified_datetime, record.session_id)
                self._repo.save_cursor(advanced)
        except (ConstraintError, ValidationError) as exc:
            report.skipped += 1
            report.errors.append(SyncErrorRecord.from_exception(exc, source_id=record.session_id))
            logger.warning(
                f"Sesión {record.session_id} omitida: [{exc.error_code}] {exc.message}"
            )
            return None

        self._upsert.notify(result)
        report.count(result)
        return advanced
