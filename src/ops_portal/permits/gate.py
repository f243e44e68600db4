from __future__ import annotations

from datetime import date
from typing import Any, Callable, Optional

from ..attendance.model import AttendanceRecord, has_clocked_in
from ..attendance.repository import AttendanceRepository
from ..backend.live_query import LiveQuery, LiveQueryHub
from ..core.constants import ATTENDANCE_COLLECTION


class SubmissionGate:
    """Whether the submit action is enabled for one ``(employee, date)``.

    Subscribes to attendance through the hub and re-evaluates on every pushed
    snapshot. While the first snapshot is loading, or after a read error, the
    gate stays closed. ``PermitService.submit`` repeats the check, so the gate
    only drives the UI state.
    """

    def __init__(
        self,
        hub: LiveQueryHub,
        attendance: AttendanceRepository,
        employee_id: str,
        work_date: date,
        on_change: Optional[Callable[[bool], Any]] = None,
    ):
        self.employee_id = employee_id
        self.work_date = work_date
        self._on_change = on_change
        self._enabled = False
        self._query: LiveQuery[AttendanceRecord] = hub.watch(
            ATTENDANCE_COLLECTION,
            lambda: attendance.find_for_employee_and_date(employee_id, work_date),
            self._on_snapshot,
        )

    def _on_snapshot(self, query: LiveQuery[AttendanceRecord]) -> None:
        enabled = query.error is None and query.data is not None and has_clocked_in(query.data)
        changed = enabled != self._enabled
        self._enabled = enabled
        if changed and self._on_change is not None:
            self._on_change(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loading(self) -> bool:
        return self._query.loading

    @property
    def error(self) -> Optional[Exception]:
        return self._query.error

    @property
    def closed(self) -> bool:
        return self._query.closed

    def close(self) -> None:
        self._query.close()

    def __enter__(self) -> "SubmissionGate":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
