"""
Constantes relacionadas con sesiones de eventos y con el job de sincronización.
"""
from enum import Enum


class EventSessionStatus(str, Enum):
    """Estado del ciclo de vida de una sesión según la API remota."""
    DRAFT = "Draft"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    # La API lo usa para estados que su representación no soporta
    UNKNOWN = "Unknown"


class EventSessionType(str, Enum):
    """Modalidad de la sesión."""
    VENUE = "Venue"
    ONLINE = "Online"


class SyncState(str, Enum):
    """Estados de la máquina del orquestador de sincronización."""
    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    PROCESSING_RECORD = "processing_record"
    ADVANCING_CURSOR = "advancing_cursor"
    ABORTED = "aborted"


class SyncRunStatus(str, Enum):
    """Resultado final de una corrida."""
    SUCCESS = "success"
    ABORTED = "aborted"
    CANCELLED = "cancelled"
    SKIPPED_LOCKED = "skipped_locked"


# Valores por defecto del job (área/tipo/endpoint identifican el cursor)
DEFAULT_JOB_AREA = "enrolment"
DEFAULT_JOB_TYPE = "event_sessions"
DEFAULT_SESSIONS_ENDPOINT = "eventsessions/"

DEFAULT_PAGE_SIZE = 250
SESSION_EXPAND = "EventSession/Event"
SESSION_ORDER_BY = "LastModifiedDateTime ASC,SessionID ASC"

# Watermark usado cuando el job nunca corrió
EPOCH_WATERMARK = "1970-01-01T00:00:00Z"

MAX_SESSION_NAME_LENGTH = 255
