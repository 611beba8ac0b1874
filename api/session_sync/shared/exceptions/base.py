"""
Excepción base para todas las excepciones personalizadas del servicio.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base del servicio.
    Todas las excepciones personalizadas deben heredar de esta clase.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Inicializa la excepción.

        Args:
            message: Mensaje de error descriptivo
            status_code: Código de estado HTTP con el que se expone en la API
            error_code: Código de error estable (se usa en reportes de corrida)
            details: Detalles adicionales del error
        """
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Representación serializable usada por el manejador global de la API."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
