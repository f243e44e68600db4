from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .employee_model import Employee
from .employee_repository import EmployeeRepository


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_employee(r: dict) -> Employee:
        return Employee(employee_id=str(r["employee_id"]), name=r["name"], is_security=bool(r["is_security"]))

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, name, is_security FROM employees WHERE employee_id=%s",
                (str(employee_id),),
            )
            r = fetchone(cur)
            return self._row_to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, name, is_security FROM employees ORDER BY name")
            return [self._row_to_employee(r) for r in fetchall(cur)]

    def list_security_personnel(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id, name, is_security FROM employees WHERE is_security=1 ORDER BY name")
            return [self._row_to_employee(r) for r in fetchall(cur)]
