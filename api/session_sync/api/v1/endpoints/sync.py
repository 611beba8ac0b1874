"""
Endpoints para sincronizacion de sesiones de eventos.
Permiten disparar el job y consultar el cursor desde monitoreo.
"""
import asyncio

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from session_sync.application.dto.sync_dto import CursorStateDTO, SyncRunResponseDTO
from session_sync.api.v1.dependencies.job_deps import get_event_sessions_job
from session_sync.infrastructure.jobs.event_sessions_job import EventSessionsJob
from session_sync.shared.constants.session_constants import SyncRunStatus


router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post(
    "/event-sessions",
    response_model=SyncRunResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar sesiones de Arlo con PostgreSQL"
)
async def sync_event_sessions(
    job: EventSessionsJob = Depends(get_event_sessions_job),
) -> SyncRunResponseDTO:
    """
    Ejecuta una corrida incremental del job de sesiones.

    - Continua desde el cursor persistido (nunca lo retrocede)
    - Usa un lock para evitar ejecuciones concurrentes (409 si esta ocupado)
    - Si la API remota falla, la corrida se aborta (502) y el cursor queda intacto

    Returns:
        SyncRunResponseDTO con contadores y errores por registro
    """
    logger.info("Iniciando sincronizacion de sesiones desde API")

    # Ejecutar sync en thread separado para no bloquear el event loop
    report = await asyncio.to_thread(job.run)
    dto = SyncRunResponseDTO.from_report(report)

    if report.status == SyncRunStatus.SKIPPED_LOCKED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ya hay una sincronizacion de sesiones en curso",
        )
    if report.status == SyncRunStatus.ABORTED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=dto.model_dump(mode="json"),
        )

    logger.info(f"Sync completado: {dto.message}")
    return dto


@router.get(
    "/event-sessions/cursor",
    response_model=CursorStateDTO,
    summary="Consultar el cursor del job de sesiones"
)
async def get_event_sessions_cursor(
    job: EventSessionsJob = Depends(get_event_sessions_job),
) -> CursorStateDTO:
    """Retorna la posicion persistida del job."""
    cursor = await asyncio.to_thread(job.read_cursor)
    return CursorStateDTO.from_cursor(cursor)
