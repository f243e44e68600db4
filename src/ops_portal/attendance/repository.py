from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_for_employee_and_date(self, employee_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        """Equality query on (employee, date); normally zero or one row."""

        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        clock_in: str,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        record_id: int,
        clock_out: str,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        record_id: int,
        clock_in: str,
        clock_out: str,
        leave_out: str,
        return_in: str,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> bool:
        """Admin-only override of a record."""

        raise NotImplementedError
