"""In-memory repositories and an inline executor shared by the tests."""

from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from dataclasses import replace
from datetime import date, datetime, timedelta

from src.ops_portal.attendance.model import AttendanceRecord
from src.ops_portal.core.constants import EMPTY_TIME
from src.ops_portal.core.enums import AttendanceStatus, PermitStatus
from src.ops_portal.permits.model import LeavePermit
from src.ops_portal.permits.repository import TRANSITION_FIELDS
from src.ops_portal.users.employee_model import Employee
from src.ops_portal.users.model import User

BUDI = "T000000002"
JUNE_1 = date(2024, 6, 1)


class InlineExecutor(Executor):
    """Runs submitted work on the caller's thread so outcomes are deterministic."""

    def submit(self, fn, /, *args, **kwargs):
        fut: Future = Future()
        try:
            fut.set_result(fn(*args, **kwargs))
        except BaseException as e:
            fut.set_exception(e)
        return fut


class FakeEmployeesRepo:
    def __init__(self, employees=None):
        self._employees = list(
            employees
            or [
                Employee("T000000001", "Ahmad Subarjo", is_security=True),
                Employee("T000000002", "Budi Santoso"),
                Employee("T000000003", "Citra Lestari"),
            ]
        )

    def get_by_id(self, employee_id):
        return next((e for e in self._employees if e.employee_id == employee_id), None)

    def list_all(self):
        return sorted(self._employees, key=lambda e: e.name)

    def list_security_personnel(self):
        return [e for e in self.list_all() if e.is_security]


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}
        self.fail_reads = False

    def add(self, employee_id, employee_name, work_date, status, clock_in=EMPTY_TIME, clock_out=EMPTY_TIME):
        rid = self._next_id
        self._next_id += 1
        self.records[rid] = AttendanceRecord(
            record_id=rid,
            employee_id=employee_id,
            employee_name=employee_name,
            work_date=work_date,
            status=status,
            clock_in=clock_in,
            clock_out=clock_out,
        )
        return rid

    def get_by_id(self, record_id):
        return self.records.get(int(record_id))

    def find_for_employee_and_date(self, employee_id, work_date):
        if self.fail_reads:
            raise RuntimeError("permission-denied")
        return [r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date]

    def list_for_date(self, work_date):
        return [r for r in self.records.values() if r.work_date == work_date]

    def create_clock_in(self, *, employee_id, employee_name, work_date, clock_in, notes=None):
        rid = self.add(employee_id, employee_name, work_date, AttendanceStatus.PRESENT, clock_in=clock_in)
        self.records[rid] = replace(self.records[rid], notes=notes)
        return rid

    def update_clock_out(self, *, record_id, clock_out, notes=None):
        rec = self.records.get(int(record_id))
        if not rec or rec.clock_out != EMPTY_TIME:
            return False
        self.records[rec.record_id] = replace(
            rec, clock_out=clock_out, status=AttendanceStatus.CLOCKED_OUT, notes=notes or rec.notes
        )
        return True

    def admin_update_record(self, *, record_id, clock_in, clock_out, leave_out, return_in, status, notes=None):
        rec = self.records.get(int(record_id))
        if not rec:
            return False
        self.records[rec.record_id] = replace(
            rec,
            clock_in=clock_in,
            clock_out=clock_out,
            leave_out=leave_out,
            return_in=return_in,
            status=status,
            notes=notes,
        )
        return True


class FakePermitsRepo:
    """Mirrors the SQL conditional update: a transition applies only from an expected status."""

    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self._clock = datetime(2024, 6, 1, 8, 0, 0)
        self.permits: dict[int, LeavePermit] = {}
        self.fail_writes = False
        self.transition_calls = 0

    def _tick(self):
        self._clock += timedelta(minutes=1)
        return self._clock

    def create(self, permit):
        if self.fail_writes:
            raise RuntimeError("permission-denied")
        with self._lock:
            pid = self._next_id
            self._next_id += 1
            self.permits[pid] = LeavePermit(
                permit_id=pid,
                employee_id=permit.employee_id,
                employee_name=permit.employee_name,
                date=permit.date,
                leave_time=permit.leave_time,
                purpose=permit.purpose,
                security_on_duty=permit.security_on_duty,
                status=PermitStatus.PENDING,
                created_at=self._tick(),
            )
            return pid

    def put(self, permit):
        with self._lock:
            self.permits[permit.permit_id] = permit
            self._next_id = max(self._next_id, permit.permit_id + 1)

    def get(self, permit_id):
        return self.permits.get(int(permit_id))

    def list_permits(self, *, employee_id=None, status=None, limit=500):
        rows = [
            p
            for p in self.permits.values()
            if (employee_id is None or p.employee_id == employee_id)
            and (status is None or p.status == status)
        ]
        rows.sort(key=lambda p: p.created_at, reverse=True)
        return rows[:limit]

    def transition(self, permit_id, *, expected, status, fields):
        assert set(fields) <= TRANSITION_FIELDS
        if self.fail_writes:
            raise RuntimeError("permission-denied")
        with self._lock:
            self.transition_calls += 1
            current = self.permits.get(int(permit_id))
            if not current or current.status not in set(expected):
                return False
            self.permits[current.permit_id] = replace(current, status=status, **fields)
            return True


class FakeUsersRepo:
    def __init__(self, users=()):
        self.users = {u.uid: u for u in users}

    def get_by_uid(self, uid):
        return self.users.get(uid)

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, uid, email, full_name, password_hash, role, status):
        self.users[uid] = User(uid=uid, email=email, full_name=full_name, password_hash=password_hash, role=role, status=status)
        return uid

    def update_role(self, uid, role):
        self.users[uid] = replace(self.users[uid], role=role)
        return True

    def update_status(self, uid, status):
        self.users[uid] = replace(self.users[uid], status=status)
        return True

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.email)


def make_permit(permit_id, status, *, employee_id=BUDI, employee_name="Budi Santoso", on=JUNE_1, created_minute=0, **extra):
    return LeavePermit(
        permit_id=permit_id,
        employee_id=employee_id,
        employee_name=employee_name,
        date=on,
        leave_time="09:00",
        purpose="Ke bank",
        security_on_duty="Ahmad Subarjo",
        status=status,
        created_at=datetime(on.year, on.month, on.day, 7, 0, 0) + timedelta(minutes=created_minute),
        **extra,
    )
