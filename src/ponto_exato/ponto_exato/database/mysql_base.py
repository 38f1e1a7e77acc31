from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.exceptions import BackendError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """Yield ``(conn, cursor)``; commit on success, rollback on error.

    Driver errors surface as :class:`BackendError` so the service layer deals
    with a single connectivity failure type.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("database connection failed: %s", e)
        raise BackendError("Falha de conexão com o banco de dados") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("database operation failed: %s", e)
        raise BackendError("Falha ao acessar o banco de dados") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def load_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON column; connectors may hand back str, bytes or already-decoded values."""

    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return default
        return json.loads(value)
    return value


def build_update(fields: Dict[str, Any], columns: Dict[str, str]) -> tuple[str, list[Any]]:
    """Translate document field names into a ``SET`` clause.

    ``columns`` maps document field -> column; unknown fields are ignored.
    """

    parts: list[str] = []
    params: list[Any] = []
    for field, value in fields.items():
        column = columns.get(field)
        if not column:
            continue
        parts.append(f"{column}=%s")
        params.append(value)
    return ", ".join(parts), params
