from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.constants import CLOCKED_IN_STATUSES, EMPTY_TIME
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per employee per day.

    Clock values are ``HH:MM`` strings, ``-`` when not recorded.
    """

    record_id: int
    employee_id: str
    employee_name: str
    work_date: date
    status: AttendanceStatus
    clock_in: str = EMPTY_TIME
    clock_out: str = EMPTY_TIME
    leave_out: str = EMPTY_TIME
    return_in: str = EMPTY_TIME
    notes: Optional[str] = None

    @property
    def has_clock_in(self) -> bool:
        return bool(self.clock_in) and self.clock_in != EMPTY_TIME

    @property
    def has_clock_out(self) -> bool:
        return bool(self.clock_out) and self.clock_out != EMPTY_TIME

    def to_document(self) -> dict:
        return {
            "id": self.record_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "clockIn": self.clock_in,
            "clockOut": self.clock_out,
            "leaveOut": self.leave_out,
            "returnIn": self.return_in,
            "notes": self.notes or EMPTY_TIME,
        }


def has_clocked_in(records: Iterable[AttendanceRecord]) -> bool:
    """Leave-permit precondition: some record for the day counts as clocked in."""
    return any(r.status in CLOCKED_IN_STATUSES for r in records)


def derive_status(*, clock_in: str, clock_out: str, leave_out: str, return_in: str, current: AttendanceStatus) -> AttendanceStatus:
    """Status after an admin edit, recomputed from the clock values."""

    def _set(v: str) -> bool:
        return bool(v) and v != EMPTY_TIME

    if _set(clock_out):
        return AttendanceStatus.CLOCKED_OUT
    if _set(leave_out) and not _set(return_in):
        return AttendanceStatus.ON_LEAVE
    if _set(clock_in):
        return AttendanceStatus.PRESENT
    return current
