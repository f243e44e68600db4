from __future__ import annotations

from datetime import datetime

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def require_time(value: str, field_name: str) -> str:
    """Validate an ``HH:MM`` string and return it normalized."""

    v = require_non_empty(value, field_name)
    try:
        return datetime.strptime(v, TIME_FORMAT).strftime(TIME_FORMAT)
    except ValueError:
        raise ValidationError(f"{field_name} tidak valid (HH:MM)")


def require_date(value: str, field_name: str):
    v = require_non_empty(value, field_name)
    try:
        return datetime.strptime(v, DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"{field_name} tidak valid (YYYY-MM-DD)")
