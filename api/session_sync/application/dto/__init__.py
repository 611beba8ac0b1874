"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .sync_dto import CursorStateDTO, SyncErrorDTO, SyncRunResponseDTO

__all__ = [
    "CursorStateDTO",
    "SyncErrorDTO",
    "SyncRunResponseDTO",
]
