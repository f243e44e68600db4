from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import PermitStatus
from .model import LeavePermit, NewLeavePermit

# Workflow fields a transition may write, besides ``status``.
TRANSITION_FIELDS = frozenset(
    {"approved_by", "security_out_signature", "actual_leave_time", "actual_return_time"}
)


class PermitRepository(Protocol):
    def create(self, permit: NewLeavePermit) -> int:
        """Insert with status Pending and a server-assigned timestamp; return the new id."""

        raise NotImplementedError

    def get(self, permit_id: int) -> Optional[LeavePermit]:
        raise NotImplementedError

    def list_permits(
        self,
        *,
        employee_id: Optional[str] = None,
        status: Optional[PermitStatus] = None,
        limit: int = 500,
    ) -> Sequence[LeavePermit]:
        """Equality filters; newest ``created_at`` first."""

        raise NotImplementedError

    def transition(
        self,
        permit_id: int,
        *,
        expected: Iterable[PermitStatus],
        status: PermitStatus,
        fields: Mapping[str, Any],
    ) -> bool:
        """Conditional update: applies only while the stored status is in ``expected``.

        Returns False when no row matched (missing permit or status changed
        concurrently). ``fields`` keys must come from ``TRANSITION_FIELDS``.
        """

        raise NotImplementedError
