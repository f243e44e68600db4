from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AccountStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "uid, email, full_name, password_hash, role, status"


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _row_to_user(r: dict) -> User:
        return User(
            uid=str(r["uid"]),
            email=r["email"],
            full_name=r["full_name"],
            password_hash=r["password_hash"],
            role=Role(r["role"]),
            status=AccountStatus(r["status"]),
        )

    def get_by_uid(self, uid: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE uid=%s", (str(uid),))
            r = fetchone(cur)
            return self._row_to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email.strip().lower(),))
            r = fetchone(cur)
            return self._row_to_user(r) if r else None

    def create_user(
        self,
        *,
        uid: str,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        status: AccountStatus,
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(uid, email, full_name, password_hash, role, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (uid, email.strip().lower(), full_name, password_hash, role.value, status.value),
            )
            return uid

    def update_role(self, uid: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE uid=%s", (role.value, str(uid)))
            return cur.rowcount > 0

    def update_status(self, uid: str, status: AccountStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE uid=%s", (status.value, str(uid)))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY full_name")
            return [self._row_to_user(r) for r in fetchall(cur)]
