"""
CLI: Arlo -> Postgres (sync incremental de sesiones de eventos).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer).
  - Cada corrida continúa desde el cursor persistido; si se corta, la siguiente
    retoma en el último registro confirmado.

Variables de entorno requeridas:
  - ARLO_PLATFORM
  - ARLO_USERNAME
  - ARLO_PASSWORD
  - DATABASE_URL (debe ser postgresql://... o postgres://...)

Ejecución:
  python scripts/sync_event_sessions.py
  python scripts/sync_event_sessions.py --schema-only

Códigos de salida:
  0 = corrida OK (puede haber registros omitidos, ver log)
  1 = corrida abortada (error de red/protocolo)
  2 = otra corrida tiene el lock
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger
from dotenv import load_dotenv

# Permite ejecutar este script desde cualquier cwd sin instalar el paquete.
# La carpeta "api" contiene el paquete raíz `session_sync/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env si existe (api/.env o repo_root/.env).
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from session_sync.core.config import Settings
from session_sync.core.logging import configure_logging
from session_sync.infrastructure.jobs.event_sessions_job import EventSessionsJob
from session_sync.infrastructure.repositories.pg_session_repository import SCHEMA_SQL
from session_sync.shared.constants.session_constants import SyncRunStatus
from session_sync.shared.exceptions.sync import SyncConfigError


EXIT_CODES = {
    SyncRunStatus.SUCCESS: 0,
    SyncRunStatus.CANCELLED: 0,
    SyncRunStatus.ABORTED: 1,
    SyncRunStatus.SKIPPED_LOCKED: 2,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sync incremental de sesiones Arlo -> Postgres")
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Solo imprime el DDL de las tablas (no ejecuta sync).",
    )
    args = parser.parse_args(argv)

    if args.schema_only:
        print(SCHEMA_SQL)
        return 0

    config = Settings()
    configure_logging(config)

    try:
        job = EventSessionsJob(config)
        logger.info(f"Iniciando sync de sesiones [{job.job_key}]...")
        report = job.run()
    except SyncConfigError as e:
        logger.error(e.message)
        return 1

    for error in report.errors:
        logger.warning(f"Error reportado: [{error.error_code}] {error.message} (source_id={error.source_id})")
    logger.info(
        f"Sync terminado: status={report.status.value}, creadas={report.created}, "
        f"actualizadas={report.updated}, omitidas={report.skipped}"
    )
    return EXIT_CODES[report.status]


if __name__ == "__main__":
    raise SystemExit(main())
