"""
Dependencias para inyeccion del job de sincronizacion.
"""
from session_sync.core.config import get_settings
from session_sync.infrastructure.jobs.event_sessions_job import EventSessionsJob


def get_event_sessions_job() -> EventSessionsJob:
    """
    Dependencia para obtener el job de sesiones.

    Returns:
        EventSessionsJob: Job configurado desde variables de entorno
    """
    return EventSessionsJob(get_settings())
