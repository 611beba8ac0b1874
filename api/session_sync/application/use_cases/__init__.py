"""
Casos de uso de la aplicacion.
"""
from .event_sessions_sync import EventSessionsSync, SyncErrorRecord, SyncRunReport

__all__ = ["EventSessionsSync", "SyncErrorRecord", "SyncRunReport"]
