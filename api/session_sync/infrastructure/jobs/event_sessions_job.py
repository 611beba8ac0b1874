"""
Job de sincronización de sesiones (Arlo -> Postgres).

Diseñado para ejecutarse como job (cron / task scheduler) o disparado desde
la API en un thread aparte. Envuelve al orquestador con:
- advisory lock por job (una sola corrida activa por cursor)
- bookkeeping de la corrida en la tabla de jobs (inicio, fin, estado, errores)
"""

from __future__ import annotations

import zlib
from typing import Callable, Optional

from loguru import logger

from session_sync.application.services.notifications import SessionNotifier
from session_sync.application.services.session_upsert import SessionUpsertEngine
from session_sync.application.use_cases.event_sessions_sync import EventSessionsSync, SyncRunReport
from session_sync.core.config import Settings
from session_sync.domain.entities.sync_cursor import SyncCursor, SyncJobKey
from session_sync.infrastructure.external.arlo.client import ArloClient, ArloCredentials
from session_sync.infrastructure.repositories.pg_session_repository import (
    PostgresSessionRepository,
    connect,
    normalize_psycopg_dsn,
)
from session_sync.shared.constants.session_constants import SyncRunStatus
from session_sync.shared.exceptions.sync import SyncConfigError


def job_key_from_settings(config: Settings) -> SyncJobKey:
    return SyncJobKey(
        area=config.SYNC_JOB_AREA,
        type=config.SYNC_JOB_TYPE,
        endpoint=config.ARLO_SESSIONS_ENDPOINT,
    )


def stable_lock_key(job_key: SyncJobKey) -> int:
    """
    Genera un lock key reproducible para pg_advisory_lock.
    """
    # hash() no es estable entre procesos; crc32 sí.
    return zlib.crc32(str(job_key).encode("utf-8")) & 0x7FFFFFFF


def build_arlo_client(config: Settings) -> ArloClient:
    """Construye el cliente validando credenciales obligatorias."""
    for name in ("ARLO_PLATFORM", "ARLO_USERNAME", "ARLO_PASSWORD"):
        if not getattr(config, name):
            raise SyncConfigError(f"Falta variable de entorno obligatoria: {name}", setting=name)
    return ArloClient(
        ArloCredentials(
            platform=config.ARLO_PLATFORM,
            username=config.ARLO_USERNAME,
            password=config.ARLO_PASSWORD,
        ),
        endpoint=config.ARLO_SESSIONS_ENDPOINT,
        page_size=config.ARLO_PAGE_SIZE,
        timeout_s=config.ARLO_TIMEOUT_S,
        max_retries=config.ARLO_MAX_RETRIES,
    )


class EventSessionsJob:
    """
    Corrida completa del job con lock y registro de estado.
    """

    def __init__(
        self,
        config: Settings,
        *,
        notifier: Optional[SessionNotifier] = None,
        client: Optional[ArloClient] = None,
        connect_fn: Callable = connect,
    ) -> None:
        self._config = config
        self._notifier = notifier or SessionNotifier()
        self._client = client
        self._connect = connect_fn
        self._job_key = job_key_from_settings(config)

    @property
    def job_key(self) -> SyncJobKey:
        return self._job_key

    @property
    def notifier(self) -> SessionNotifier:
        return self._notifier

    def _open_repository(self) -> PostgresSessionRepository:
        dsn = normalize_psycopg_dsn(self._config.effective_database_url)
        return PostgresSessionRepository(self._connect(dsn))

    def run(self, should_stop: Optional[Callable[[], bool]] = None) -> SyncRunReport:
        """
        Ejecuta una corrida incremental completa.

        Si otra corrida tiene el lock, retorna un reporte `skipped_locked`
        sin tocar el cursor.
        """
        client = self._client or build_arlo_client(self._config)
        repo = self._open_repository()
        lock_key = stable_lock_key(self._job_key)
        try:
            if not repo.try_advisory_lock(lock_key):
                logger.warning(f"Sync [{self._job_key}] ya está corriendo (advisory lock ocupado). Saliendo.")
                return SyncRunReport(job_key=self._job_key, status=SyncRunStatus.SKIPPED_LOCKED)

            try:
                # DDL solo con el lock tomado
                repo.ensure_schema()
                repo.mark_run_started(self._job_key)
                sync = EventSessionsSync(
                    repository=repo,
                    fetcher=client,
                    upsert_engine=SessionUpsertEngine(repo, self._notifier),
                    job_key=self._job_key,
                    platform=self._config.ARLO_PLATFORM,
                )
                try:
                    report = sync.run(should_stop=should_stop)
                except Exception as e:
                    # Intentar persistir el error del run. Si esto falla, igual relanzamos.
                    try:
                        repo.mark_run_finished(self._job_key, status="error", error=str(e)[:2000])
                    except Exception:
                        logger.exception("No se pudo registrar el error de la corrida")
                    raise
                repo.mark_run_finished(
                    self._job_key,
                    status=report.status.value,
                    error=report.error_summary(),
                )
                return report
            finally:
                self._release_lock(repo, lock_key)
        finally:
            repo.connection.close()

    def _release_lock(self, repo: PostgresSessionRepository, lock_key: int) -> None:
        """
        Libera el advisory lock sin tapar el error de la corrida.

        Si la conexión se cortó, Postgres ya liberó el lock de la sesión.
        """
        try:
            repo.release_advisory_lock(lock_key)
        except Exception:
            logger.exception(f"No se pudo liberar el advisory lock de [{self._job_key}]")

    def read_cursor(self) -> SyncCursor:
        """Cursor persistido del job (para monitoreo)."""
        repo = self._open_repository()
        try:
            repo.ensure_schema()
            return repo.load_cursor(self._job_key)
        finally:
            repo.connection.close()
