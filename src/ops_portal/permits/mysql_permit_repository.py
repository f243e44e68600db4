from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..core.enums import PermitStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone, placeholders
from .model import LeavePermit, NewLeavePermit
from .repository import TRANSITION_FIELDS, PermitRepository

_COLUMNS = """
    permit_id, employee_id, employee_name, permit_date, leave_time, purpose,
    security_on_duty, status, approved_by, security_out_signature,
    actual_leave_time, actual_return_time, created_at
"""


class MySQLPermitRepository(PermitRepository):
    """``leave_permits`` table, the SQL counterpart of the leave-permits collection."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_permit(r: dict) -> LeavePermit:
        return LeavePermit(
            permit_id=int(r["permit_id"]),
            employee_id=str(r["employee_id"]),
            employee_name=r["employee_name"],
            date=as_date(r["permit_date"]),
            leave_time=r["leave_time"],
            purpose=r["purpose"],
            security_on_duty=r["security_on_duty"],
            status=PermitStatus(r["status"]),
            created_at=r["created_at"],
            approved_by=r.get("approved_by"),
            security_out_signature=r.get("security_out_signature"),
            actual_leave_time=r.get("actual_leave_time"),
            actual_return_time=r.get("actual_return_time"),
        )

    def create(self, permit: NewLeavePermit) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_permits(
                    employee_id, employee_name, permit_date, leave_time,
                    purpose, security_on_duty, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    permit.employee_id,
                    permit.employee_name,
                    permit.date,
                    permit.leave_time,
                    permit.purpose,
                    permit.security_on_duty,
                    PermitStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, permit_id: int) -> Optional[LeavePermit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_permits WHERE permit_id=%s", (int(permit_id),))
            r = fetchone(cur)
            return self._row_to_permit(r) if r else None

    def list_permits(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[PermitStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeavePermit]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_permits
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [self._row_to_permit(r) for r in fetchall(cur)]

    def transition(
        self,
        permit_id: int,
        *,
        expected: Iterable[PermitStatus],
        status: PermitStatus,
        fields: Mapping[str, Any],
    ) -> bool:
        unknown = set(fields) - TRANSITION_FIELDS
        if unknown:
            raise ValueError(f"not a transition field: {sorted(unknown)}")

        expected_values = [s.value for s in expected]
        columns = ["status"] + sorted(fields)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        values: list[object] = [status.value] + [fields[c] for c in sorted(fields)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_permits
                SET {assignments}
                WHERE permit_id=%s AND status IN ({placeholders(expected_values)})
                """,
                tuple(values + [int(permit_id)] + expected_values),
            )
            return cur.rowcount > 0
