"""
Configuración de fixtures para pytest.
"""
import pytest
from loguru import logger

from fakes import InMemorySessionRepository, ScriptedPageFetcher
from session_sync.application.services.notifications import SessionNotifier
from session_sync.domain.entities.sync_cursor import SyncJobKey


@pytest.fixture
def job_key() -> SyncJobKey:
    return SyncJobKey(area="enrolment", type="event_sessions", endpoint="eventsessions/")


@pytest.fixture
def repository() -> InMemorySessionRepository:
    """Repositorio en memoria, vacío para cada test."""
    return InMemorySessionRepository()


@pytest.fixture
def notifier() -> SessionNotifier:
    return SessionNotifier()


@pytest.fixture
def received_events(notifier: SessionNotifier) -> list:
    """Lista donde se acumulan los eventos publicados."""
    events: list = []
    notifier.subscribe(events.append)
    return events


@pytest.fixture
def fetcher_factory():
    def _make(*pages) -> ScriptedPageFetcher:
        return ScriptedPageFetcher(list(pages))
    return _make


@pytest.fixture
def captured_logs():
    """Captura los mensajes de loguru emitidos durante el test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
