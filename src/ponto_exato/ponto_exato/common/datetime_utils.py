from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.exceptions import ValidationError

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def format_minutes(minutes: int) -> str:
    sign = "-" if minutes < 0 else ""
    minutes = abs(int(minutes))
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_date_key(value: Any) -> str:
    """Normalize the accepted date inputs to the canonical ``YYYY-MM-DD`` key.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD``, ``DD/MM/YYYY``,
    ``DD-MM-YYYY``, ``YYYY/MM/DD`` and ISO datetimes (``2026-02-14T00:00:00``).
    """

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = str(value or "").strip()
    if not text:
        raise ValidationError("Data é obrigatória")

    if "T" in text:
        text = text.split("T", 1)[0]

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    raise ValidationError(f"Data inválida: {value!r}")


def coerce_timestamp(value: Any) -> datetime:
    """Coerce a stored timestamp into a naive local ``datetime``.

    Documents can carry:
    - datetime.datetime / datetime.date
    - ISO strings (optionally ending in 'Z')
    - epoch seconds or epoch milliseconds
    - backend timestamp objects exposing ``to_datetime()`` or ``seconds``/``nanoseconds``
    """

    if value is None:
        raise TypeError("Timestamp ausente")

    if isinstance(value, datetime):
        return _as_naive_local(value)

    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    if isinstance(value, bool):
        raise TypeError(f"Unsupported timestamp value type: {type(value)!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
        if abs(seconds) > 1e11:
            seconds /= 1000.0
        return datetime.fromtimestamp(seconds)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return _as_naive_local(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"Invalid timestamp string: {value!r}")

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return _as_naive_local(to_datetime())

    if hasattr(value, "seconds"):
        seconds = float(getattr(value, "seconds")) + float(getattr(value, "nanoseconds", 0)) / 1e9
        return datetime.fromtimestamp(seconds)

    raise TypeError(f"Unsupported timestamp value type: {type(value)!r}")


def _as_naive_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
