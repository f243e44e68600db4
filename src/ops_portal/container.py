from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .backend.error_channel import ErrorChannel, LoggingErrorListener, RecentErrorBuffer
from .backend.live_query import LiveQueryHub
from .backend.write_dispatcher import WriteDispatcher
from .core.constants import DEFAULT_ERROR_BUFFER_SIZE, DEFAULT_OVERTIME_NOTE_HOURS, DEFAULT_WRITE_WORKERS
from .database.connection import DBConfig, DatabaseConnection
from .permits.mysql_permit_repository import MySQLPermitRepository
from .permits.repository import PermitRepository
from .permits.service import PermitService
from .users.employee_repository import EmployeeRepository
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    channel: ErrorChannel
    hub: LiveQueryHub
    dispatcher: WriteDispatcher
    error_buffer: RecentErrorBuffer

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    permits_repo: PermitRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    permit_service: PermitService

    unsubscribers: tuple[Callable[[], None], ...] = field(default=())

    def close(self) -> None:
        """Detach startup listeners and drain pending writes."""
        for unsubscribe in self.unsubscribers:
            unsubscribe()
        self.hub.close_all()
        self.dispatcher.shutdown(wait=True)


def assemble_container(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    permits_repo: PermitRepository,
    write_workers: int = DEFAULT_WRITE_WORKERS,
    error_buffer_size: int = DEFAULT_ERROR_BUFFER_SIZE,
    overtime_note_hours: int = DEFAULT_OVERTIME_NOTE_HOURS,
) -> Container:
    """Wire services around any repository implementation (MySQL or in-memory)."""

    channel = ErrorChannel()
    error_buffer = RecentErrorBuffer(error_buffer_size)
    unsubscribers = (
        channel.subscribe(LoggingErrorListener()),
        channel.subscribe(error_buffer),
    )
    hub = LiveQueryHub(channel)
    dispatcher = WriteDispatcher(channel, max_workers=write_workers)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, employees_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        permits_repo,
        dispatcher=dispatcher,
        hub=hub,
        overtime_note_hours=overtime_note_hours,
    )
    permit_service = PermitService(
        permits_repo,
        attendance_repo,
        employees_repo,
        dispatcher=dispatcher,
        hub=hub,
    )

    return Container(
        channel=channel,
        hub=hub,
        dispatcher=dispatcher,
        error_buffer=error_buffer,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        permits_repo=permits_repo,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        permit_service=permit_service,
        unsubscribers=unsubscribers,
    )


def build_container(
    *,
    db_config: dict,
    write_workers: int = DEFAULT_WRITE_WORKERS,
    error_buffer_size: int = DEFAULT_ERROR_BUFFER_SIZE,
    overtime_note_hours: int = DEFAULT_OVERTIME_NOTE_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        permits_repo=MySQLPermitRepository(conn),
        write_workers=write_workers,
        error_buffer_size=error_buffer_size,
        overtime_note_hours=overtime_note_hours,
    )
