"""
Servicios de aplicacion del pipeline de sesiones.
"""
from .notifications import SessionCreated, SessionEvent, SessionNotifier, SessionUpdated
from .session_mapper import build_session_fields, map_remote_session, validate_session
from .session_upsert import SessionUpsertEngine, UpsertResult

__all__ = [
    "SessionCreated",
    "SessionEvent",
    "SessionNotifier",
    "SessionUpdated",
    "build_session_fields",
    "map_remote_session",
    "validate_session",
    "SessionUpsertEngine",
    "UpsertResult",
]
