from __future__ import annotations

import pytest

from fakes import BUDI, JUNE_1, make_permit

from src.ops_portal.core.enums import AttendanceStatus, Operation, PermitStatus, Role
from src.ops_portal.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)


def _submit(service, **overrides):
    data = dict(
        current_role=Role.EMPLOYEE,
        employee_id=BUDI,
        permit_date="2024-06-01",
        leave_time="09:00",
        security_on_duty="Ahmad Subarjo",
        purpose="Ke bank",
    )
    data.update(overrides)
    return service.submit(**data)


def test_submit_creates_pending_permit(permit_service, permits_repo, budi_present):
    result = _submit(permit_service).wait()

    assert result.ok
    permit = permits_repo.get(result.value)
    assert permit.status == PermitStatus.PENDING
    assert permit.employee_name == "Budi Santoso"
    assert permit.date == JUNE_1


def test_submit_without_attendance_is_rejected(permit_service, permits_repo):
    with pytest.raises(PreconditionError):
        _submit(permit_service)
    assert permits_repo.permits == {}


@pytest.mark.parametrize(
    "status,allowed",
    [
        (AttendanceStatus.PRESENT, True),
        (AttendanceStatus.CLOCKED_OUT, True),
        (AttendanceStatus.ON_LEAVE, True),
        (AttendanceStatus.ABSENT, False),
    ],
)
def test_can_submit_follows_attendance_status(permit_service, attendance_repo, status, allowed):
    attendance_repo.add(BUDI, "Budi Santoso", JUNE_1, status)
    assert permit_service.can_submit(BUDI, JUNE_1) is allowed


@pytest.mark.parametrize(
    "field,value",
    [
        ("purpose", "  "),
        ("security_on_duty", ""),
        ("leave_time", "9 pagi"),
        ("permit_date", "01/06/2024"),
        ("employee_id", ""),
    ],
)
def test_submit_validation_happens_before_any_write(permit_service, permits_repo, budi_present, field, value):
    with pytest.raises(ValidationError):
        _submit(permit_service, **{field: value})
    assert permits_repo.permits == {}


def test_submit_unknown_employee(permit_service):
    with pytest.raises(NotFoundError):
        _submit(permit_service, employee_id="T999")


def test_admin_cannot_submit(permit_service, budi_present):
    with pytest.raises(AuthorizationError):
        _submit(permit_service, current_role=Role.ADMIN)


def test_failed_create_is_published_not_raised(permit_service, permits_repo, errors, budi_present):
    permits_repo.fail_writes = True

    result = _submit(permit_service).wait()

    assert not result.ok
    assert len(errors) == 1
    event = errors[0]
    assert event.path == "leave-permits"
    assert event.operation == Operation.CREATE
    assert event.payload["employeeName"] == "Budi Santoso"
    assert event.payload["status"] == "Pending"


def test_only_admin_decides(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))
    with pytest.raises(AuthorizationError):
        permit_service.approve(current_role=Role.SECURITY, permit_id=1, actor_name="Ahmad")


def test_approve_records_approver(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))

    assert permit_service.approve(current_role=Role.ADMIN, permit_id=1, actor_name="Admin Demo").wait().ok

    permit = permits_repo.get(1)
    assert permit.status == PermitStatus.APPROVED
    assert permit.approved_by == "Admin Demo"


def test_clarification_then_reject(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))

    permit_service.clarify(current_role=Role.ADMIN, permit_id=1, actor_name="Admin Demo").wait()
    assert permits_repo.get(1).status == PermitStatus.NEEDS_CLARIFICATION

    permit_service.reject(current_role=Role.ADMIN, permit_id=1, actor_name="Admin Dua").wait()
    permit = permits_repo.get(1)
    assert permit.status == PermitStatus.REJECTED
    assert permit.approved_by == "Admin Dua"


def test_repeated_decision_is_noop(permit_service, permits_repo, errors):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED, approved_by="Admin Demo"))

    handle = permit_service.approve(current_role=Role.ADMIN, permit_id=1, actor_name="Admin Dua")

    assert handle.done()
    assert handle.wait().ok
    assert permits_repo.transition_calls == 0
    assert permits_repo.get(1).approved_by == "Admin Demo"
    assert errors == []


def test_second_admin_clarify_records_new_approver(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))

    permit_service.clarify(current_role=Role.ADMIN, permit_id=1, actor_name="Admin A").wait()
    assert permit_service.clarify(current_role=Role.ADMIN, permit_id=1, actor_name="Admin B").wait().ok

    permit = permits_repo.get(1)
    assert permit.status == PermitStatus.NEEDS_CLARIFICATION
    assert permit.approved_by == "Admin B"
    assert permits_repo.transition_calls == 2


def test_same_admin_clarify_twice_writes_once(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))

    permit_service.clarify(current_role=Role.ADMIN, permit_id=1, actor_name="Admin A").wait()
    handle = permit_service.clarify(current_role=Role.ADMIN, permit_id=1, actor_name="Admin A")

    assert handle.done()
    assert permits_repo.transition_calls == 1


def test_reject_after_approve_is_invalid(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED))
    with pytest.raises(InvalidTransitionError):
        permit_service.reject(current_role=Role.ADMIN, permit_id=1, actor_name="Admin Demo")


def test_decide_by_name(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING))
    permit_service.decide("clarify", current_role=Role.ADMIN, permit_id=1, actor_name="Admin Demo").wait()
    assert permits_repo.get(1).status == PermitStatus.NEEDS_CLARIFICATION

    with pytest.raises(ValidationError):
        permit_service.decide("sign_out", current_role=Role.ADMIN, permit_id=1, actor_name="Admin Demo")


def test_sign_out_requires_signature(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED))
    with pytest.raises(ValidationError, match="Tanda Tangan Wajib Diisi"):
        permit_service.sign_out(current_role=Role.SECURITY, permit_id=1, signature="")
    assert permits_repo.get(1).status == PermitStatus.APPROVED


@pytest.mark.parametrize("status", [PermitStatus.PENDING, PermitStatus.REJECTED, PermitStatus.RETURNED])
def test_sign_out_only_from_approved(permit_service, permits_repo, status):
    permits_repo.put(make_permit(1, status))
    with pytest.raises(InvalidTransitionError):
        permit_service.sign_out(current_role=Role.SECURITY, permit_id=1, signature="data:image/png;base64,AAA")


def test_sign_out_writes_signature_and_time_together(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED))

    permit_service.sign_out(
        current_role=Role.SECURITY, permit_id=1, signature="data:image/png;base64,AAA", actual_time="9:15"
    ).wait()

    permit = permits_repo.get(1)
    assert permit.status == PermitStatus.ON_LEAVE
    assert permit.security_out_signature == "data:image/png;base64,AAA"
    assert permit.actual_leave_time == "09:15"


def test_concurrent_status_change_is_reported_as_conflict(permit_service, permits_repo, errors):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED))
    # Another guard signs the permit out between our read and our write.
    original_get = permits_repo.get

    def stale_get(permit_id):
        permit = original_get(permit_id)
        permits_repo.put(make_permit(1, PermitStatus.ON_LEAVE, actual_leave_time="09:00"))
        return permit

    permits_repo.get = stale_get
    result = permit_service.sign_out(current_role=Role.SECURITY, permit_id=1, signature="sig", actual_time="09:20").wait()

    assert result.conflict
    assert permits_repo.permits[1].actual_leave_time == "09:00"
    assert errors[0].reason.startswith("conflict")
    assert errors[0].payload["actualLeaveTime"] == "09:20"


def test_confirm_return_only_from_on_leave(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.APPROVED))
    with pytest.raises(InvalidTransitionError):
        permit_service.confirm_return(current_role=Role.SECURITY, permit_id=1, actual_time="12:30")


def test_missing_permit(permit_service):
    with pytest.raises(NotFoundError):
        permit_service.approve(current_role=Role.ADMIN, permit_id=42, actor_name="Admin Demo")


def test_views(permit_service, permits_repo):
    permits_repo.put(make_permit(1, PermitStatus.PENDING, created_minute=1))
    permits_repo.put(make_permit(2, PermitStatus.APPROVED, created_minute=2, employee_id="T000000003"))

    queues = permit_service.queues(month="2024-06")
    assert [p.permit_id for p in queues.admin] == [1]
    assert [p.permit_id for p in queues.sign_out] == [2]
    assert [p.permit_id for p in queues.recap] == [2, 1]
    assert [p.permit_id for p in permit_service.my_permits(BUDI)] == [1]


def test_watch_permits_receives_new_submissions(permit_service, budi_present):
    query = permit_service.watch_permits()
    assert query.data == []

    _submit(permit_service).wait()

    assert len(query.data) == 1
    query.close()
