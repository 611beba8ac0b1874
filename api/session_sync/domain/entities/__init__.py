"""
Entidades del dominio.
"""
from .event_session import EventSession, RemoteEvent, RemoteSessionRecord, SessionPage
from .sync_cursor import SyncCursor, SyncJobKey

__all__ = [
    "EventSession",
    "RemoteEvent",
    "RemoteSessionRecord",
    "SessionPage",
    "SyncCursor",
    "SyncJobKey",
]
