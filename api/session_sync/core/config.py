"""
Configuracion central del servicio.
Gestiona variables de entorno y configuraciones globales.
Soporta DATABASE_URL completa o por componentes.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field

from session_sync.shared.constants.session_constants import (
    DEFAULT_JOB_AREA,
    DEFAULT_JOB_TYPE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SESSIONS_ENDPOINT,
)


class Settings(BaseSettings):
    """
    Clase de configuracion del servicio.
    Lee variables de entorno y proporciona valores por defecto.

    Variables obligatorias para correr el job:
    - ARLO_PLATFORM: host de la plataforma (p.ej. 'acme.arlo.co')
    - ARLO_USERNAME / ARLO_PASSWORD
    - DATABASE_URL (o sus componentes)
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Event Session Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="sync_user")
    DATABASE_PASSWORD: str = Field(default="sync_pass")
    DATABASE_NAME: str = Field(default="sync_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")

    # Arlo
    ARLO_PLATFORM: str = Field(default="")
    ARLO_USERNAME: str = Field(default="")
    ARLO_PASSWORD: str = Field(default="")
    ARLO_SESSIONS_ENDPOINT: str = Field(default=DEFAULT_SESSIONS_ENDPOINT)
    ARLO_PAGE_SIZE: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    ARLO_TIMEOUT_S: float = Field(default=30.0, gt=0)
    ARLO_MAX_RETRIES: int = Field(default=4, ge=0)

    # Identidad del job (define el cursor)
    SYNC_JOB_AREA: str = Field(default=DEFAULT_JOB_AREA)
    SYNC_JOB_TYPE: str = Field(default=DEFAULT_JOB_TYPE)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/session_sync.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_settings() -> Settings:
    """Relee el entorno; los tests y el CLI construyen su propia instancia."""
    return Settings()


# Instancia global de configuración
settings = Settings()
