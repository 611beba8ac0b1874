"""
Configuracion de logging (loguru).
"""
import sys

from loguru import logger

from session_sync.core.config import Settings

_configured = False


def configure_logging(config: Settings) -> None:
    """
    Configura sinks de consola y archivo rotativo.
    Idempotente: solo la primera llamada agrega sinks.
    """
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, level=config.LOG_LEVEL)
    logger.add(
        config.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        level=config.LOG_LEVEL
    )
    _configured = True
    logger.debug(f"Logging configurado (nivel={config.LOG_LEVEL}, archivo={config.LOG_FILE})")
