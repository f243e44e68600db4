from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ..core.constants import DATE_FORMAT, EMPTY_TIME, TIME_FORMAT
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
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


def placeholders(values: Iterable[Any]) -> str:
    """``%s,%s,%s`` for an ``IN (...)`` clause; values must be non-empty."""
    n = len(list(values))
    if n == 0:
        raise ValueError("IN clause needs at least one value")
    return ",".join(["%s"] * n)


def as_date(value: Any) -> date:
    """DATE columns come back as ``date``; tolerate ``datetime`` and ISO strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value), DATE_FORMAT).date()


def as_hhmm(value: Any) -> str:
    """Normalize stored clock values to ``HH:MM`` (or ``-`` when unset).

    mysql-connector can return TIME as ``time`` or ``timedelta``; the portal
    stores most clock values as ``HH:MM`` strings already.
    """

    if value is None or value == "":
        return EMPTY_TIME
    if isinstance(value, time):
        return value.strftime(TIME_FORMAT)
    if isinstance(value, timedelta):
        total_minutes = (int(value.total_seconds()) % 86400) // 60
        return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
    return str(value)[:5] if str(value) != EMPTY_TIME else EMPTY_TIME
