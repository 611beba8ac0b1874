"""
Sincronización incremental de sesiones de eventos (Arlo -> PostgreSQL).
"""

__version__ = "1.0.0"
