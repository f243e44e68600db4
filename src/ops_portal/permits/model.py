from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PermitStatus


@dataclass(frozen=True)
class LeavePermit:
    """Domain entity: a leave permit (izin keluar) and its workflow fields.

    ``employee_*``, ``date``, ``leave_time``, ``purpose`` and
    ``security_on_duty`` are fixed at submission; the rest is written by the
    workflow transitions only.
    """

    permit_id: int
    employee_id: str
    employee_name: str
    date: date
    leave_time: str
    purpose: str
    security_on_duty: str
    status: PermitStatus
    created_at: datetime
    approved_by: Optional[str] = None
    security_out_signature: Optional[str] = None
    actual_leave_time: Optional[str] = None
    actual_return_time: Optional[str] = None

    def to_document(self, *, include_signature: bool = True) -> dict:
        """Serialize with the document field names used by the clients."""
        doc = {
            "id": self.permit_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.date.isoformat(),
            "leaveTime": self.leave_time,
            "purpose": self.purpose,
            "securityOnDuty": self.security_on_duty,
            "status": self.status.value,
            "approvedBy": self.approved_by,
            "actualLeaveTime": self.actual_leave_time,
            "actualReturnTime": self.actual_return_time,
            "timestamp": self.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        }
        if include_signature:
            doc["securityOutSignature"] = self.security_out_signature
        return doc


@dataclass(frozen=True)
class NewLeavePermit:
    """Validated submission, ready to be written."""

    employee_id: str
    employee_name: str
    date: date
    leave_time: str
    purpose: str
    security_on_duty: str

    def to_document(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "date": self.date.isoformat(),
            "leaveTime": self.leave_time,
            "securityOnDuty": self.security_on_duty,
            "purpose": self.purpose,
            "status": PermitStatus.PENDING.value,
        }
