"""
Cliente mínimo de la API REST de Arlo (sin SDKs externos).

Requisitos cubiertos:
- requests
- filtro incremental por cursor compuesto (LastModifiedDateTime, SessionID)
- rate-limit/backoff (429, 5xx)
- una página por llamada, con señal has_more
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from loguru import logger

from session_sync.domain.entities.event_session import SessionPage
from session_sync.domain.entities.sync_cursor import SyncCursor
from session_sync.shared.constants.session_constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SESSIONS_ENDPOINT,
    SESSION_EXPAND,
    SESSION_ORDER_BY,
)
from session_sync.shared.exceptions.sync import ProtocolError, TransportError

from .resources import parse_sessions_collection

API_BASE_PATH = "api/2012-02-01/auth/resources"


@dataclass(frozen=True)
class ArloCredentials:
    platform: str
    username: str
    password: str


def build_session_filter(cursor: SyncCursor) -> str:
    """
    Construye el filtro OData para traer sesiones posteriores al cursor:

    (modified > wm) OR (modified == wm AND SessionID > id)

    La segunda rama solo se agrega si el cursor tiene tie-break id (0 incluido).
    """
    watermark = cursor.watermark
    expr = f"(LastModifiedDateTime gt datetime('{watermark}'))"
    if cursor.last_source_id is not None:
        expr += (
            f" OR (LastModifiedDateTime eq datetime('{watermark}')"
            f" AND SessionID gt {cursor.last_source_id})"
        )
    return expr


def build_sessions_query(cursor: SyncCursor, page_size: int) -> dict[str, Any]:
    """Parámetros de la consulta para la página siguiente al cursor."""
    return {
        "$top": page_size,
        "$expand": SESSION_EXPAND,
        "$filter": build_session_filter(cursor),
        "$orderby": SESSION_ORDER_BY,
    }


class ArloClient:
    """
    Cliente HTTP de Arlo. Expone `fetch_sessions_page` (SessionPageFetcher).

    Importante:
    - No interpreta timestamps más allá de validar su formato: se persisten tal cual.
    - El timeout aplica a cada request, no a la corrida.
    """

    def __init__(
        self,
        credentials: ArloCredentials,
        *,
        endpoint: str = DEFAULT_SESSIONS_ENDPOINT,
        page_size: int = DEFAULT_PAGE_SIZE,
        session: Optional[requests.Session] = None,
        timeout_s: float = 30,
        max_retries: int = 4,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size debe ser > 0 (recibido {page_size})")
        self._creds = credentials
        self._endpoint = endpoint.strip("/") + "/"
        self._page_size = page_size
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._sleep = sleep
        self._session = session or requests.Session()

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def sessions_url(self) -> str:
        return f"https://{self._creds.platform}/{API_BASE_PATH}/{self._endpoint}"

    def fetch_sessions_page(self, cursor: SyncCursor) -> SessionPage:
        """
        Trae la página de sesiones inmediatamente posterior al cursor,
        ordenada por (LastModifiedDateTime, SessionID) ascendente.
        """
        params = build_sessions_query(cursor, self._page_size)
        payload = self._request_json("GET", self.sessions_url, params=params)
        return parse_sessions_collection(payload)

    def _backoff_seconds(self, attempt: int, resp: Optional[requests.Response]) -> float:
        retry_after = resp.headers.get("Retry-After") if resp is not None else None
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return self._min_backoff_s
        # Exponencial simple + jitter proporcional
        base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
        return base + (0.15 * base)

    def _request_json(self, method: str, url: str, *, params: dict[str, Any]) -> Any:
        """
        Request HTTP con backoff para 429/5xx y errores de conexión.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx / timeout / conexión: exponencial con jitter.
        - 4xx (no 429): error inmediato (config/auth mal).
        """
        headers = {"Accept": "application/json"}
        auth = (self._creds.username, self._creds.password)

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    auth=auth,
                    timeout=self._timeout_s,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= self._max_retries:
                    raise TransportError(
                        f"Arlo no respondió tras {attempt} reintentos: {e}", url=url
                    ) from e
                sleep_s = self._backoff_seconds(attempt, None)
                logger.warning(f"Error de red contra Arlo ({e}); reintento en {sleep_s:.1f}s")
                self._sleep(sleep_s)
                continue
            except requests.RequestException as e:
                raise TransportError(f"Request a Arlo falló: {e}", url=url) from e

            if 200 <= resp.status_code < 300:
                try:
                    return resp.json()
                except ValueError as e:
                    raise ProtocolError(
                        f"Arlo devolvió un cuerpo que no es JSON ({resp.status_code})"
                    ) from e

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise TransportError(
                        f"Arlo error {resp.status_code} tras {attempt} reintentos: {resp.text[:500]}",
                        http_status=resp.status_code,
                        url=url,
                    )
                sleep_s = self._backoff_seconds(attempt, resp)
                logger.warning(f"Arlo respondió {resp.status_code}; reintento en {sleep_s:.1f}s")
                self._sleep(sleep_s)
                continue

            # Errores no recuperables
            raise TransportError(
                f"Request a Arlo falló {resp.status_code}: {resp.text[:500]}",
                http_status=resp.status_code,
                url=url,
            )

        # range() vacío solo si max_retries < 0
        raise TransportError(f"Sin intentos configurados para {url}", url=url)
