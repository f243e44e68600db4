from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import EMPTY_TIME
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_hhmm, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, employee_id, employee_name, work_date, status,
    clock_in, clock_out, leave_out, return_in, notes
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_record(r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=int(r["record_id"]),
            employee_id=str(r["employee_id"]),
            employee_name=r["employee_name"],
            work_date=as_date(r["work_date"]),
            status=AttendanceStatus(r["status"]),
            clock_in=as_hhmm(r.get("clock_in")),
            clock_out=as_hhmm(r.get("clock_out")),
            leave_out=as_hhmm(r.get("leave_out")),
            return_in=as_hhmm(r.get("return_in")),
            notes=r.get("notes"),
        )

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return self._row_to_record(r) if r else None

    def find_for_employee_and_date(self, employee_id: str, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
                (str(employee_id), work_date),
            )
            return [self._row_to_record(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE work_date=%s ORDER BY employee_name",
                (work_date,),
            )
            return [self._row_to_record(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        employee_id: str,
        employee_name: str,
        work_date: date,
        clock_in: str,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, employee_name, work_date, status, clock_in, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(employee_id),
                    employee_name,
                    work_date,
                    AttendanceStatus.PRESENT.value,
                    clock_in,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update_clock_out(self, *, record_id: int, clock_out: str, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, status=%s, notes=COALESCE(%s, notes)
                WHERE record_id=%s AND clock_out=%s
                """,
                (clock_out, AttendanceStatus.CLOCKED_OUT.value, notes, int(record_id), EMPTY_TIME),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_in=%s, clock_out=%s, leave_out=%s, return_in=%s, status=%s, notes=%s
                WHERE record_id=%s
                """,
                (clock_in, clock_out, leave_out, return_in, status.value, notes, int(record_id)),
            )
            return cur.rowcount > 0
