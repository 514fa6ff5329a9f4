from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role used for access control."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Attendance status stored on a record.

    ABSENT is never written by the punch cycle; it only appears in derived views.
    """

    PUNCHED_IN = "PunchedIn"
    PRESENT = "Present"
    HALF_DAY = "HalfDay"
    ABSENT = "Absent"


class PunchState(str, Enum):
    """Punch cycle of one employee on one date."""

    UNPUNCHED = "Unpunched"
    PUNCHED_IN = "PunchedIn"
    CLOSED = "Closed"


class LeaveType(str, Enum):
    FULL = "Full"
    HALF = "Half"
    PERMISSION = "Permission"

    @property
    def needs_time_window(self) -> bool:
        return self in {LeaveType.HALF, LeaveType.PERMISSION}


class LeaveStatus(str, Enum):
    """Leave approval flow. APPROVED and REJECTED are terminal."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class DayStatus(str, Enum):
    """Per (employee, date) classification used by calendar views."""

    PRESENT = "Present"
    HALF_DAY = "HalfDay"
    PUNCHED_IN = "PunchedIn"
    LEAVE = "Leave"
    ABSENT = "Absent"
