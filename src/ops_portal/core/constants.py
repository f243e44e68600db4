"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus, PermitStatus

LEAVE_PERMITS_COLLECTION = "leave-permits"
ATTENDANCE_COLLECTION = "attendance"

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
EMPTY_TIME = "-"

# Attendance states that count as "has clocked in" for the permit precondition.
CLOCKED_IN_STATUSES = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.CLOCKED_OUT, AttendanceStatus.ON_LEAVE}
)

# Permits in these states have no printable letter yet.
NON_PRINTABLE_PERMIT_STATUSES = frozenset({PermitStatus.PENDING, PermitStatus.REJECTED})

DEFAULT_WRITE_WORKERS = 4
DEFAULT_ERROR_BUFFER_SIZE = 50
DEFAULT_OVERTIME_NOTE_HOURS = 8
DEFAULT_LIST_LIMIT = 500
