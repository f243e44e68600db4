from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import AccountStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .employee_model import Employee
from .employee_repository import EmployeeRepository
from .model import User
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    uid: str
    email: str
    full_name: str
    role: Role
    status: AccountStatus

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.full_name,
            "role": self.role.value,
            "status": self.status.value,
        }


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Email atau kata sandi salah")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except Exception:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Email atau kata sandi salah")
        if not user.is_approved:
            raise AuthenticationError("Akun Anda masih menunggu persetujuan admin")

        return SessionUser(
            uid=user.uid,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            status=user.status,
        )


class UserService:
    """Use case: manage accounts (admin) and read the employee directory."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

    def create_account(
        self,
        *,
        current_role: Role,
        email: str,
        full_name: str,
        password: str,
        role: Role,
        approved: bool = False,
    ) -> str:
        self._require_admin(current_role)
        email = require_non_empty(email, "Email").lower()
        full_name = require_non_empty(full_name, "Nama")
        require_min_length(password, "Kata sandi", 6)

        if "@" not in email:
            raise ValidationError("Email tidak valid")
        if self._users.get_by_email(email):
            raise ValidationError("Email sudah terdaftar")

        return self._users.create_user(
            uid=uuid.uuid4().hex,
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
            status=AccountStatus.APPROVED if approved else AccountStatus.PENDING,
        )

    def list_users(self, *, current_role: Role) -> Sequence[User]:
        self._require_admin(current_role)
        return self._users.list_all()

    def set_role(self, *, current_role: Role, uid: str, role: Role) -> None:
        self._require_admin(current_role)
        if not self._users.get_by_uid(uid):
            raise NotFoundError("Pengguna tidak ditemukan")
        self._users.update_role(uid, role)

    def set_status(self, *, current_role: Role, uid: str, status: AccountStatus) -> None:
        self._require_admin(current_role)
        if not self._users.get_by_uid(uid):
            raise NotFoundError("Pengguna tidak ditemukan")
        self._users.update_status(uid, status)

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def list_security_personnel(self) -> Sequence[Employee]:
        return self._employees.list_security_personnel()
