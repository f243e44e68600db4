from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AccountStatus, Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for portal accounts.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_uid(self, uid: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_role(self, uid: str, role: Role) -> bool:
        raise NotImplementedError

    def update_status(self, uid: str, status: AccountStatus) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError
