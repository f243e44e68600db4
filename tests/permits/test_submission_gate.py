from __future__ import annotations

from datetime import date, datetime

from fakes import BUDI, JUNE_1

from src.ops_portal.core.constants import ATTENDANCE_COLLECTION
from src.ops_portal.core.enums import Operation
from src.ops_portal.permits.gate import SubmissionGate


def test_gate_opens_when_attendance_arrives(hub, attendance_service, attendance_repo):
    changes = []
    gate = SubmissionGate(hub, attendance_repo, BUDI, JUNE_1, on_change=changes.append)
    assert not gate.loading
    assert not gate.enabled

    attendance_service.clock_in(employee_id=BUDI, now=datetime(2024, 6, 1, 7, 55)).wait()

    assert gate.enabled
    assert changes == [True]
    gate.close()


def test_gate_closed_after_close(hub, attendance_repo):
    gate = SubmissionGate(hub, attendance_repo, BUDI, JUNE_1)
    assert hub.subscriber_count(ATTENDANCE_COLLECTION) == 1

    gate.close()

    assert gate.closed
    assert hub.subscriber_count(ATTENDANCE_COLLECTION) == 0


def test_gate_other_day_stays_closed(hub, attendance_repo, budi_present):
    with SubmissionGate(hub, attendance_repo, BUDI, date(2024, 6, 2)) as gate:
        assert not gate.enabled
    with SubmissionGate(hub, attendance_repo, BUDI, JUNE_1) as gate:
        assert gate.enabled


def test_read_failure_keeps_gate_closed_and_is_published(hub, attendance_repo, errors, budi_present):
    attendance_repo.fail_reads = True

    gate = SubmissionGate(hub, attendance_repo, BUDI, JUNE_1)

    assert not gate.enabled
    assert gate.error is not None
    assert errors[0].operation == Operation.LIST
    assert errors[0].path == ATTENDANCE_COLLECTION
    gate.close()
