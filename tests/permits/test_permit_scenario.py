from __future__ import annotations

from fakes import BUDI, JUNE_1

from src.ops_portal.core.enums import PermitStatus, Role
from src.ops_portal.permits.queues import derive_queues


def test_full_permit_day(permit_service, permits_repo, budi_present, errors):
    """Budi clocks in, leaves at 09:15 for the bank and is back at 12:30."""

    assert permit_service.can_submit(BUDI, JUNE_1)

    permit_id = permit_service.submit(
        current_role=Role.EMPLOYEE,
        employee_id=BUDI,
        permit_date="2024-06-01",
        leave_time="09:00",
        security_on_duty="Ahmad Subarjo",
        purpose="Ke bank",
    ).wait().value

    queues = derive_queues(permits_repo.list_permits())
    assert [p.permit_id for p in queues.admin] == [permit_id]

    permit_service.approve(current_role=Role.ADMIN, permit_id=permit_id, actor_name="Admin Demo").wait()
    # Double click on "approve" must not write again.
    permit_service.approve(current_role=Role.ADMIN, permit_id=permit_id, actor_name="Admin Demo").wait()
    assert permits_repo.transition_calls == 1

    queues = derive_queues(permits_repo.list_permits())
    assert queues.admin == []
    assert [p.permit_id for p in queues.sign_out] == [permit_id]

    permit_service.sign_out(
        current_role=Role.SECURITY,
        permit_id=permit_id,
        signature="data:image/png;base64,iVBORw0KGgo=",
        actual_time="09:15",
    ).wait()
    queues = derive_queues(permits_repo.list_permits())
    assert [p.permit_id for p in queues.returning] == [permit_id]

    permit_service.confirm_return(current_role=Role.SECURITY, permit_id=permit_id, actual_time="12:30").wait()

    permit = permits_repo.get(permit_id)
    assert permit.status == PermitStatus.RETURNED
    assert permit.approved_by == "Admin Demo"
    assert permit.actual_leave_time == "09:15"
    assert permit.actual_return_time == "12:30"
    assert permit.security_out_signature.startswith("data:image/png")

    queues = derive_queues(permits_repo.list_permits(), month="2024-06")
    assert queues.admin == [] and queues.sign_out == [] and queues.returning == []
    assert [p.permit_id for p in queues.recap] == [permit_id]
    assert errors == []
