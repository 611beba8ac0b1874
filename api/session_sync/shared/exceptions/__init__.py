"""
Excepciones del servicio.
"""
from .base import AppException
from .sync import (
    SyncError,
    SyncConfigError,
    TransportError,
    ProtocolError,
    StalledCursorError,
    ConstraintError,
    ValidationError,
    CursorRegressionError,
)

__all__ = [
    "AppException",
    "SyncError",
    "SyncConfigError",
    "TransportError",
    "ProtocolError",
    "StalledCursorError",
    "ConstraintError",
    "ValidationError",
    "CursorRegressionError",
]
