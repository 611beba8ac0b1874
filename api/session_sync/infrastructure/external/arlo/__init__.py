"""
Integración con la API REST de Arlo (colección de sesiones de eventos).
"""
from .client import ArloClient, ArloCredentials, build_session_filter, build_sessions_query
from .resources import parse_event_session, parse_sessions_collection

__all__ = [
    "ArloClient",
    "ArloCredentials",
    "build_session_filter",
    "build_sessions_query",
    "parse_event_session",
    "parse_sessions_collection",
]
