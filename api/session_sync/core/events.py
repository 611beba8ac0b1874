"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable
from fastapi import FastAPI
from loguru import logger

from session_sync.core.config import settings
from session_sync.core.logging import configure_logging


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        configure_logging(settings)
        logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Entorno: {settings.ENVIRONMENT}")
        _validate_config()
        logger.success("Aplicacion iniciada correctamente")

    return startup


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    warnings = []

    for name in ("ARLO_PLATFORM", "ARLO_USERNAME", "ARLO_PASSWORD"):
        if not getattr(settings, name):
            warnings.append(f"{name} no configurada - la sincronizacion no funcionara")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        logger.info("Aplicacion cerrada")

    return shutdown
