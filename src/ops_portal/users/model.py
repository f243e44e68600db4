from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AccountStatus, Role


@dataclass(frozen=True)
class User:
    """Domain entity: portal account.

    Note: Plain data object (no DB access code).
    """

    uid: str
    email: str
    full_name: str
    password_hash: str
    role: Role
    status: AccountStatus = AccountStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == AccountStatus.APPROVED
