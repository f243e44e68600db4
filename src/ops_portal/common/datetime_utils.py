from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import EMPTY_TIME, MONTH_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError

_DAY_NAMES_ID = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
_MONTH_NAMES_ID = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


def parse_month(value: str) -> tuple[int, int]:
    """Parse a ``YYYY-MM`` month selector into ``(year, month)``."""
    try:
        d = datetime.strptime((value or "").strip(), MONTH_FORMAT)
    except ValueError:
        raise ValidationError("Bulan tidak valid (YYYY-MM)")
    return d.year, d.month


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_hhmm(value: datetime) -> str:
    return value.strftime(TIME_FORMAT)


def parse_hhmm(value: Optional[str]):
    """Return a ``time`` for ``HH:MM`` input, ``None`` for blank or ``-``."""
    v = (value or "").strip()
    if not v or v == EMPTY_TIME:
        return None
    return datetime.strptime(v, TIME_FORMAT).time()


def minutes_between(start: str, end: str) -> int:
    """Minutes from ``start`` to ``end`` (both ``HH:MM``); 0 if either is missing."""
    s = parse_hhmm(start)
    e = parse_hhmm(end)
    if s is None or e is None:
        return 0
    return (e.hour * 60 + e.minute) - (s.hour * 60 + s.minute)


def format_long_date_id(value: date) -> str:
    """``Sabtu, 01 Juni 2024`` style date used on printed documents."""
    return f"{_DAY_NAMES_ID[value.weekday()]}, {value.day:02d} {_MONTH_NAMES_ID[value.month - 1]} {value.year}"


def format_month_id(year: int, month: int) -> str:
    return f"{_MONTH_NAMES_ID[month - 1]} {year}"
