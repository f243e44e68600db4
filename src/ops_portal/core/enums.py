from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used to pick which surfaces a user may act on."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    SECURITY = "security"
    RECEPTIONIST = "receptionist"


class AccountStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class AttendanceStatus(str, Enum):
    """Attendance states as stored in the ledger."""

    PRESENT = "Present"
    CLOCKED_OUT = "Clocked Out"
    ABSENT = "Absent"
    ON_LEAVE = "On Leave"


class PermitStatus(str, Enum):
    """Lifecycle states of a leave permit (izin keluar)."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    ON_LEAVE = "On Leave"
    RETURNED = "Returned"
    NEEDS_CLARIFICATION = "Butuh Klarifikasi"


class PermitAction(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    CLARIFY = "clarify"
    SIGN_OUT = "sign_out"
    CONFIRM_RETURN = "confirm_return"


class Operation(str, Enum):
    """Backend operation kinds reported on the error channel."""

    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
