"""
Excepciones del pipeline de sincronización de sesiones.

Se dividen en dos familias según su alcance:
- Nivel corrida (TransportError, ProtocolError): abortan la corrida, el cursor
  queda intacto y la siguiente ejecución programada reintenta.
- Nivel registro (ConstraintError, ValidationError): se omite el registro, se
  reporta el error y la corrida continúa con el siguiente.
"""
from typing import Any, Dict, Optional

from session_sync.shared.exceptions.base import AppException


class SyncError(AppException):
    """Excepción base para errores de sincronización."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "SYNC_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            details=details,
        )


class SyncConfigError(SyncError):
    """Configuración incompleta o inválida del pipeline."""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="SYNC_CONFIG_ERROR",
            details={"setting": setting} if setting else None,
        )


class TransportError(SyncError):
    """Falla de red o HTTP contra la API remota."""

    def __init__(self, message: str, http_status: Optional[int] = None, url: Optional[str] = None):
        details: Dict[str, Any] = {}
        if http_status is not None:
            details["http_status"] = http_status
        if url:
            details["url"] = url
        super().__init__(
            message=message,
            status_code=502,
            error_code="TRANSPORT_ERROR",
            details=details,
        )
        self.http_status = http_status


class ProtocolError(SyncError):
    """Respuesta remota ilegible o con una forma inesperada."""

    def __init__(self, message: str, error_code: str = "PROTOCOL_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=502,
            error_code=error_code,
            details=details,
        )


class StalledCursorError(ProtocolError):
    """
    La API anuncia más páginas pero la página actual no movió el cursor.

    Pedir de nuevo la misma página devolvería exactamente lo mismo.
    """

    def __init__(self, last_source_time_modified: Optional[str], last_source_id: Optional[int]):
        super().__init__(
            message=(
                "La página no avanzó el cursor y la API indica más resultados "
                f"(cursor={last_source_time_modified}, id={last_source_id})"
            ),
            error_code="STALLED_CURSOR",
            details={
                "last_source_time_modified": last_source_time_modified,
                "last_source_id": last_source_id,
            },
        )


class ConstraintError(SyncError):
    """El almacenamiento local rechazó la escritura de un registro."""

    def __init__(self, message: str, source_id: Optional[int] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONSTRAINT_ERROR",
            details={"source_id": source_id} if source_id is not None else None,
        )
        self.source_id = source_id


class ValidationError(SyncError):
    """La entidad mapeada no cumple las restricciones de campos locales."""

    def __init__(self, message: str, field: Optional[str] = None, source_id: Optional[int] = None):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if source_id is not None:
            details["source_id"] = source_id
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details,
        )
        self.field = field
        self.source_id = source_id


class CursorRegressionError(SyncError):
    """Intento de mover el cursor hacia atrás."""

    def __init__(self, current: str, proposed: str):
        super().__init__(
            message=f"El cursor no puede retroceder: actual={current}, propuesto={proposed}",
            error_code="CURSOR_REGRESSION",
            details={"current": current, "proposed": proposed},
        )
