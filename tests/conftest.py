from __future__ import annotations

import pytest

from fakes import BUDI, JUNE_1, FakeAttendanceRepo, FakeEmployeesRepo, FakePermitsRepo, InlineExecutor

from src.ops_portal.attendance.service import AttendanceService
from src.ops_portal.backend.error_channel import ErrorChannel
from src.ops_portal.backend.live_query import LiveQueryHub
from src.ops_portal.backend.write_dispatcher import WriteDispatcher
from src.ops_portal.core.enums import AttendanceStatus
from src.ops_portal.permits.service import PermitService


@pytest.fixture()
def channel():
    return ErrorChannel()


@pytest.fixture()
def errors(channel):
    received = []
    unsubscribe = channel.subscribe(received.append)
    yield received
    unsubscribe()


@pytest.fixture()
def hub(channel):
    return LiveQueryHub(channel)


@pytest.fixture()
def dispatcher(channel):
    return WriteDispatcher(channel, executor=InlineExecutor())


@pytest.fixture()
def employees_repo():
    return FakeEmployeesRepo()


@pytest.fixture()
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture()
def permits_repo():
    return FakePermitsRepo()


@pytest.fixture()
def permit_service(permits_repo, attendance_repo, employees_repo, dispatcher, hub):
    return PermitService(permits_repo, attendance_repo, employees_repo, dispatcher=dispatcher, hub=hub)


@pytest.fixture()
def attendance_service(attendance_repo, employees_repo, permits_repo, dispatcher, hub):
    return AttendanceService(attendance_repo, employees_repo, permits_repo, dispatcher=dispatcher, hub=hub)


@pytest.fixture()
def budi_present(attendance_repo):
    return attendance_repo.add(BUDI, "Budi Santoso", JUNE_1, AttendanceStatus.PRESENT, clock_in="07:55")
