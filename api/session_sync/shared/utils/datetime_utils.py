"""
Utilidades para manejo de fechas y horas.

Los timestamps de la API remota se guardan tal cual llegan (strings ISO 8601).
Para ordenarlos y compararlos se convierten a una clave que conserva toda la
precisión fraccional (la API puede devolver hasta 7 dígitos).
"""
import re
from datetime import datetime, timezone, timedelta, tzinfo
from typing import Optional, Tuple

_ISO_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?$"
)

# (instante UTC truncado a segundos, nanosegundos)
SourceTimeKey = Tuple[datetime, int]


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    Un datetime naive se interpreta como UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_offset(tz: Optional[str], default_tz: Optional[tzinfo] = None) -> tzinfo:
    if not tz:
        return default_tz or timezone.utc
    if tz == "Z":
        return timezone.utc
    sign = 1 if tz[0] == "+" else -1
    digits = tz[1:].replace(":", "")
    return timezone(sign * timedelta(hours=int(digits[:2]), minutes=int(digits[2:])))


def source_time_key(value: str, default_tz: Optional[tzinfo] = None) -> SourceTimeKey:
    """
    Convierte un timestamp remoto en una clave ordenable.

    Un timestamp sin offset se interpreta en `default_tz` (UTC si no se indica).

    Raises:
        ValueError: si el string no es un ISO 8601 soportado
    """
    match = _ISO_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Timestamp con formato no soportado: {value!r}")

    base = datetime.strptime(match.group("base"), "%Y-%m-%dT%H:%M:%S")
    base = base.replace(tzinfo=_parse_offset(match.group("tz"), default_tz)).astimezone(timezone.utc)
    fraction = (match.group("fraction") or "").ljust(9, "0")[:9]
    return base, int(fraction)


def parse_source_datetime(value: str, default_tz: Optional[tzinfo] = None) -> datetime:
    """
    Parsea un timestamp remoto a datetime aware en UTC.

    La precisión por debajo del microsegundo se descarta.
    """
    base, nanos = source_time_key(value, default_tz)
    return base + timedelta(microseconds=nanos // 1000)
