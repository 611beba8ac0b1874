"""
DTOs relacionados con la sincronizacion de sesiones.
Definen la estructura de datos expuesta por la API de monitoreo.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field

from session_sync.application.use_cases.event_sessions_sync import SyncErrorRecord, SyncRunReport
from session_sync.domain.entities.sync_cursor import SyncCursor
from session_sync.shared.constants.session_constants import SyncRunStatus


class CursorStateDTO(BaseModel):
    """DTO con la posicion persistida de un job."""

    area: str = Field(..., description="Area del job")
    type: str = Field(..., description="Tipo del job")
    endpoint: str = Field(..., description="Endpoint remoto sincronizado")
    last_source_time_modified: Optional[str] = Field(None, description="Watermark (LastModifiedDateTime remoto)")
    last_source_id: Optional[int] = Field(None, description="Tie-break id (SessionID remoto)")
    time_last_request: Optional[datetime] = Field(None, description="Ultima consulta exitosa a la API")

    @classmethod
    def from_cursor(cls, cursor: SyncCursor) -> "CursorStateDTO":
        return cls(
            area=cursor.job_key.area,
            type=cursor.job_key.type,
            endpoint=cursor.job_key.endpoint,
            last_source_time_modified=cursor.last_source_time_modified,
            last_source_id=cursor.last_source_id,
            time_last_request=cursor.time_last_request,
        )


class SyncErrorDTO(BaseModel):
    """Error reportado durante una corrida."""

    error_code: str
    message: str
    source_id: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: SyncErrorRecord) -> "SyncErrorDTO":
        return cls(
            error_code=record.error_code,
            message=record.message,
            source_id=record.source_id,
            details=record.details,
        )


class SyncRunResponseDTO(BaseModel):
    """Resultado de una corrida del job."""

    success: bool
    status: str
    message: str
    pages_fetched: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    errors: List[SyncErrorDTO] = Field(default_factory=list)
    cursor: Optional[CursorStateDTO] = None

    @classmethod
    def from_report(cls, report: SyncRunReport) -> "SyncRunResponseDTO":
        return cls(
            success=report.success,
            status=report.status.value,
            message=_report_message(report),
            pages_fetched=report.pages_fetched,
            created=report.created,
            updated=report.updated,
            unchanged=report.unchanged,
            skipped=report.skipped,
            errors=[SyncErrorDTO.from_record(e) for e in report.errors],
            cursor=CursorStateDTO.from_cursor(report.cursor) if report.cursor else None,
        )


def _report_message(report: SyncRunReport) -> str:
    """Mensaje legible según el estado final de la corrida."""
    if report.status == SyncRunStatus.SKIPPED_LOCKED:
        return "Ya hay una sincronizacion de sesiones en curso"

    counters = f"{report.created} creada(s), {report.updated} actualizada(s)"
    if report.status == SyncRunStatus.ABORTED:
        reason = report.errors[-1].message if report.errors else "error remoto"
        message = f"Sincronizacion abortada ({reason}): {counters} antes del error"
    elif report.status == SyncRunStatus.CANCELLED:
        message = f"Sincronizacion cancelada: {counters} antes de detenerse"
    elif report.created + report.updated > 0:
        message = f"Sincronizacion completada: {counters}"
    else:
        message = "Sin cambios en Arlo"

    if report.skipped:
        message += f", {report.skipped} omitida(s) con error"
    return message
