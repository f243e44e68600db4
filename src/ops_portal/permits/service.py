from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..attendance.model import has_clocked_in
from ..attendance.repository import AttendanceRepository
from ..backend.live_query import LiveQuery, LiveQueryHub
from ..backend.write_dispatcher import WriteDispatcher, WriteHandle
from ..common.datetime_utils import format_hhmm, now_local
from ..common.validators import require_date, require_non_empty, require_time
from ..core.constants import DEFAULT_LIST_LIMIT, LEAVE_PERMITS_COLLECTION
from ..core.enums import Operation, PermitAction, Role
from ..core.exceptions import AuthorizationError, NotFoundError, PreconditionError, ValidationError, WriteConflictError
from ..users.employee_repository import EmployeeRepository
from . import state_machine
from .model import LeavePermit, NewLeavePermit
from .queues import PermitQueues, derive_queues, monthly_recap
from .repository import PermitRepository

logger = logging.getLogger(__name__)


class PermitService:
    """Leave-permit workflow (izin keluar).

    Commands validate synchronously and raise ``DomainError`` subclasses before
    anything is written. The write itself is dispatched; its failure never
    reaches the caller and is reported on the error channel instead.

    Every transition is written as a conditional update on the statuses the
    action is allowed from, so a permit that moved on concurrently is not
    overwritten.
    """

    def __init__(
        self,
        permits: PermitRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        dispatcher: WriteDispatcher,
        hub: LiveQueryHub,
    ):
        self._permits = permits
        self._attendance = attendance
        self._employees = employees
        self._dispatcher = dispatcher
        self._hub = hub

    def _notify(self) -> None:
        self._hub.notify(LEAVE_PERMITS_COLLECTION)

    @staticmethod
    def _require_role(current_role: Optional[Role], action: PermitAction) -> None:
        if current_role not in state_machine.roles_for(action):
            raise AuthorizationError("Anda tidak memiliki akses untuk aksi ini")

    def _get_permit(self, permit_id: int) -> LeavePermit:
        permit = self._permits.get(int(permit_id))
        if not permit:
            raise NotFoundError("Izin keluar tidak ditemukan")
        return permit

    # ---- precondition -------------------------------------------------------

    def can_submit(self, employee_id: str, on_date: date) -> bool:
        """True when the employee has a clocked-in attendance record for ``on_date``."""
        if not employee_id:
            return False
        return has_clocked_in(self._attendance.find_for_employee_and_date(employee_id, on_date))

    # ---- commands -----------------------------------------------------------

    def submit(
        self,
        *,
        current_role: Optional[Role],
        employee_id: str,
        permit_date: str,
        leave_time: str,
        security_on_duty: str,
        purpose: str,
    ) -> WriteHandle:
        self._require_role(current_role, PermitAction.SUBMIT)

        employee_id = require_non_empty(employee_id, "Pegawai")
        day = require_date(permit_date, "Tanggal")
        leave_time = require_time(leave_time, "Waktu keluar")
        security_on_duty = require_non_empty(security_on_duty, "Security bertugas")
        purpose = require_non_empty(purpose, "Keperluan")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Pegawai tidak ditemukan")

        if not self.can_submit(employee.employee_id, day):
            raise PreconditionError(f"{employee.name} belum absen masuk pada tanggal tersebut")

        new_permit = NewLeavePermit(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            date=day,
            leave_time=leave_time,
            purpose=purpose,
            security_on_duty=security_on_duty,
        )
        logger.info("Submitting leave permit for %s on %s", employee.employee_id, day)
        return self._dispatcher.dispatch(
            path=LEAVE_PERMITS_COLLECTION,
            operation=Operation.CREATE,
            payload=new_permit.to_document(),
            write=lambda: self._permits.create(new_permit),
            after_success=[self._notify],
        )

    def _transition(
        self,
        permit: LeavePermit,
        action: PermitAction,
        fields: dict[str, Any],
        payload: dict[str, Any],
    ) -> WriteHandle:
        target = state_machine.next_status(permit.status, action)
        expected = state_machine.sources_for(action)
        path = f"{LEAVE_PERMITS_COLLECTION}/{permit.permit_id}"

        def write() -> int:
            ok = self._permits.transition(permit.permit_id, expected=expected, status=target, fields=fields)
            if not ok:
                raise WriteConflictError(f"status izin {permit.permit_id} sudah berubah, {action.value} dibatalkan")
            return permit.permit_id

        logger.info("Permit %s: %s -> %s (%s)", permit.permit_id, permit.status.value, target.value, action.value)
        return self._dispatcher.dispatch(
            path=path,
            operation=Operation.UPDATE,
            payload={"status": target.value, **payload},
            write=write,
            after_success=[self._notify],
        )

    def _decide(
        self,
        action: PermitAction,
        *,
        current_role: Optional[Role],
        permit_id: int,
        actor_name: str,
    ) -> WriteHandle:
        self._require_role(current_role, action)
        actor_name = require_non_empty(actor_name, "Nama penyetuju")
        permit = self._get_permit(permit_id)

        repeated = permit.status == state_machine.target_for(action)
        if repeated and (permit.approved_by == actor_name or not state_machine.can_transition(permit.status, action)):
            # Already in the requested state, nothing to record.
            return WriteHandle.completed(
                permit.permit_id,
                path=f"{LEAVE_PERMITS_COLLECTION}/{permit.permit_id}",
                operation=Operation.UPDATE,
            )

        return self._transition(
            permit,
            action,
            fields={"approved_by": actor_name},
            payload={"approvedBy": actor_name},
        )

    def approve(self, *, current_role: Optional[Role], permit_id: int, actor_name: str) -> WriteHandle:
        return self._decide(PermitAction.APPROVE, current_role=current_role, permit_id=permit_id, actor_name=actor_name)

    def reject(self, *, current_role: Optional[Role], permit_id: int, actor_name: str) -> WriteHandle:
        return self._decide(PermitAction.REJECT, current_role=current_role, permit_id=permit_id, actor_name=actor_name)

    def clarify(self, *, current_role: Optional[Role], permit_id: int, actor_name: str) -> WriteHandle:
        return self._decide(PermitAction.CLARIFY, current_role=current_role, permit_id=permit_id, actor_name=actor_name)

    def decide(self, decision: str, *, current_role: Optional[Role], permit_id: int, actor_name: str) -> WriteHandle:
        """Dispatch an admin decision by name (``approve``/``reject``/``clarify``)."""
        try:
            action = PermitAction(decision)
        except ValueError:
            raise ValidationError("Keputusan tidak valid")
        if action not in state_machine.DECISION_ACTIONS:
            raise ValidationError("Keputusan tidak valid")
        return self._decide(action, current_role=current_role, permit_id=permit_id, actor_name=actor_name)

    def sign_out(
        self,
        *,
        current_role: Optional[Role],
        permit_id: int,
        signature: str,
        actual_time: Optional[str] = None,
    ) -> WriteHandle:
        self._require_role(current_role, PermitAction.SIGN_OUT)
        if not signature or not str(signature).strip():
            raise ValidationError("Tanda Tangan Wajib Diisi")
        leave_at = require_time(actual_time, "Waktu keluar") if actual_time else format_hhmm(now_local())

        permit = self._get_permit(permit_id)
        return self._transition(
            permit,
            PermitAction.SIGN_OUT,
            fields={"security_out_signature": signature, "actual_leave_time": leave_at},
            payload={"securityOutSignature": signature, "actualLeaveTime": leave_at},
        )

    def confirm_return(
        self,
        *,
        current_role: Optional[Role],
        permit_id: int,
        actual_time: Optional[str] = None,
    ) -> WriteHandle:
        self._require_role(current_role, PermitAction.CONFIRM_RETURN)
        return_at = require_time(actual_time, "Waktu kembali") if actual_time else format_hhmm(now_local())

        permit = self._get_permit(permit_id)
        return self._transition(
            permit,
            PermitAction.CONFIRM_RETURN,
            fields={"actual_return_time": return_at},
            payload={"actualReturnTime": return_at},
        )

    # ---- views --------------------------------------------------------------

    def get(self, permit_id: int) -> LeavePermit:
        return self._get_permit(permit_id)

    def snapshot(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeavePermit]:
        return self._permits.list_permits(limit=limit)

    def queues(self, *, month: Optional[str] = None) -> PermitQueues:
        return derive_queues(self.snapshot(), month)

    def my_permits(self, employee_id: str) -> Sequence[LeavePermit]:
        return self._permits.list_permits(employee_id=employee_id)

    def recap(self, month: str) -> Sequence[LeavePermit]:
        return monthly_recap(self.snapshot(), month)

    def watch_permits(self, listener=None) -> LiveQuery[LeavePermit]:
        """Live snapshot of the whole collection; derive queues from ``query.data``."""
        return self._hub.watch(LEAVE_PERMITS_COLLECTION, self.snapshot, listener)
