from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..backend.live_query import LiveQuery, LiveQueryHub
from ..backend.write_dispatcher import WriteDispatcher, WriteHandle
from ..common.datetime_utils import format_hhmm, minutes_between, now_local
from ..common.validators import require_time
from ..core.constants import ATTENDANCE_COLLECTION, DEFAULT_OVERTIME_NOTE_HOURS, EMPTY_TIME
from ..core.enums import AttendanceStatus, Operation, PermitStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permits.repository import PermitRepository
from ..users.employee_repository import EmployeeRepository
from .model import AttendanceRecord, derive_status, has_clocked_in
from .repository import AttendanceRepository


class AttendanceService:
    """Attendance ledger: clock in/out, admin corrections and the daily roster.

    Writes are dispatched asynchronously like every other backend write; the
    returned handle may be awaited or detached by the caller.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        permits: PermitRepository,
        *,
        dispatcher: WriteDispatcher,
        hub: LiveQueryHub,
        overtime_note_hours: int = DEFAULT_OVERTIME_NOTE_HOURS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._permits = permits
        self._dispatcher = dispatcher
        self._hub = hub
        self._overtime_note_minutes = int(overtime_note_hours) * 60

    def _notify(self) -> None:
        self._hub.notify(ATTENDANCE_COLLECTION)

    def has_clocked_in(self, employee_id: str, work_date: date) -> bool:
        return has_clocked_in(self._attendance.find_for_employee_and_date(employee_id, work_date))

    def watch_employee_day(self, employee_id: str, work_date: date, listener=None) -> LiveQuery[AttendanceRecord]:
        return self._hub.watch(
            ATTENDANCE_COLLECTION,
            lambda: self._attendance.find_for_employee_and_date(employee_id, work_date),
            listener,
        )

    def _today_record(self, employee_id: str, today: date) -> Optional[AttendanceRecord]:
        rows = self._attendance.find_for_employee_and_date(employee_id, today)
        return rows[0] if rows else None

    def clock_in(self, *, employee_id: str, now: Optional[datetime] = None, notes: str = "") -> WriteHandle:
        now = now or now_local()
        today = now.date()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Pegawai tidak ditemukan")

        existing = self._today_record(employee_id, today)
        if existing and (existing.has_clock_in or existing.has_clock_out):
            raise ValidationError(f"{employee.name} sudah absen masuk hari ini")

        clock_in = format_hhmm(now)
        note = (notes or "").strip() or None
        payload = {
            "employeeId": employee.employee_id,
            "employeeName": employee.name,
            "date": today.isoformat(),
            "status": AttendanceStatus.PRESENT.value,
            "clockIn": clock_in,
        }
        return self._dispatcher.dispatch(
            path=ATTENDANCE_COLLECTION,
            operation=Operation.CREATE,
            payload=payload,
            write=lambda: self._attendance.create_clock_in(
                employee_id=employee.employee_id,
                employee_name=employee.name,
                work_date=today,
                clock_in=clock_in,
                notes=note,
            ),
            after_success=[self._notify],
        )

    def clock_out(self, *, employee_id: str, now: Optional[datetime] = None, notes: str = "") -> WriteHandle:
        now = now or now_local()
        record = self._today_record(employee_id, now.date())
        if not record or not record.has_clock_in:
            raise ValidationError("Pegawai belum absen masuk hari ini")
        if record.has_clock_out:
            raise ValidationError("Pegawai sudah absen pulang hari ini")

        on_leave = self._permits.list_permits(employee_id=employee_id, status=PermitStatus.ON_LEAVE)
        if on_leave:
            raise ValidationError(
                'Tidak dapat absen pulang. Pegawai masih tercatat "On Leave" di modul Izin Keluar.'
            )

        clock_out = format_hhmm(now)
        note = (notes or "").strip()
        if minutes_between(record.clock_in, clock_out) > self._overtime_note_minutes and not note:
            raise ValidationError("Jam kerja lebih dari 8 jam. Mohon isi keterangan lembur.")

        path = f"{ATTENDANCE_COLLECTION}/{record.record_id}"
        payload = {"clockOut": clock_out, "status": AttendanceStatus.CLOCKED_OUT.value}
        if note:
            payload["notes"] = note

        def write() -> int:
            if not self._attendance.update_clock_out(record_id=record.record_id, clock_out=clock_out, notes=note or None):
                raise ValidationError("Absen pulang sudah tercatat")
            return record.record_id

        return self._dispatcher.dispatch(
            path=path,
            operation=Operation.UPDATE,
            payload=payload,
            write=write,
            after_success=[self._notify],
        )

    def admin_update(
        self,
        *,
        current_role: Role,
        record_id: int,
        clock_in: str = "",
        clock_out: str = "",
        leave_out: str = "",
        return_in: str = "",
        notes: str = "",
    ) -> WriteHandle:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Data absensi tidak ditemukan")

        def _clean(value: str, label: str) -> str:
            v = (value or "").strip()
            if not v or v == EMPTY_TIME:
                return EMPTY_TIME
            return require_time(v, label)

        values = {
            "clock_in": _clean(clock_in, "Jam masuk"),
            "clock_out": _clean(clock_out, "Jam pulang"),
            "leave_out": _clean(leave_out, "Jam keluar"),
            "return_in": _clean(return_in, "Jam kembali"),
        }
        status = derive_status(current=record.status, **values)
        note = (notes or "").strip()
        note = None if note in ("", EMPTY_TIME) else note

        payload = {
            "clockIn": values["clock_in"],
            "clockOut": values["clock_out"],
            "leaveOut": values["leave_out"],
            "returnIn": values["return_in"],
            "notes": note,
            "status": status.value,
        }

        def write() -> int:
            if not self._attendance.admin_update_record(record_id=record.record_id, status=status, notes=note, **values):
                raise NotFoundError("Data absensi tidak ditemukan")
            return record.record_id

        return self._dispatcher.dispatch(
            path=f"{ATTENDANCE_COLLECTION}/{record.record_id}",
            operation=Operation.UPDATE,
            payload=payload,
            write=write,
            after_success=[self._notify],
        )

    def daily_roster(self, work_date: date) -> Sequence[AttendanceRecord]:
        """Every employee for ``work_date``; employees without a record show as Absent."""

        by_employee = {r.employee_id: r for r in self._attendance.list_for_date(work_date)}
        roster: list[AttendanceRecord] = []
        for emp in self._employees.list_all():
            rec = by_employee.get(emp.employee_id)
            if rec is None:
                rec = AttendanceRecord(
                    record_id=0,
                    employee_id=emp.employee_id,
                    employee_name=emp.name,
                    work_date=work_date,
                    status=AttendanceStatus.ABSENT,
                )
            roster.append(rec)
        return roster
