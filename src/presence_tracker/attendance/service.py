from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, check_range
from ..core.enums import AttendanceStatus, PunchState
from ..core.exceptions import DuplicatePunchError, NegativeDurationError, NoOpenPunchError, NotFoundError
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord
from .policy import HalfDayThresholdPolicy, PunchOutPolicy
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


def compute_total_hours(punch_in: datetime, punch_out: datetime) -> Decimal:
    """Worked hours rounded half-up to 2 decimals."""
    seconds = Decimal(str((punch_out - punch_in).total_seconds()))
    if seconds < 0:
        raise NegativeDurationError("Punch-out precedes punch-in")
    return (seconds / Decimal(3600)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


class AttendanceService:
    """Punch cycle per (employee, date): Unpunched -> PunchedIn -> Closed.

    Never writes ABSENT; absence is derived by the reporting layer.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: Optional[EmployeeRepository] = None,
        *,
        policy: Optional[PunchOutPolicy] = None,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policy = policy or HalfDayThresholdPolicy()
        self._clock = clock or SystemClock()

    def punch_in(self, employee_id: str, *, work_date: Optional[date] = None, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock.now()
        work_date = work_date or now.date()

        if self._employees is not None and not self._employees.get_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")

        if self._attendance.get_for_employee_and_date(employee_id, work_date):
            raise DuplicatePunchError(f"Already punched in on {work_date.isoformat()}")

        # The store's unique key decides concurrent punch-ins; the loser gets DuplicatePunchError too.
        self._attendance.create_punch_in(
            employee_id=employee_id,
            work_date=work_date,
            punch_in=now,
            status=AttendanceStatus.PUNCHED_IN,
        )
        logger.info("Punch-in %s on %s at %s", employee_id, work_date, now.isoformat())
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def punch_out(self, employee_id: str, *, work_date: Optional[date] = None, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock.now()
        work_date = work_date or now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if not record or record.punch_in is None:
            raise NoOpenPunchError(f"No punch-in found for {work_date.isoformat()}")
        if record.punch_out is not None:
            raise NoOpenPunchError(f"Already punched out on {work_date.isoformat()}")

        total_hours = compute_total_hours(record.punch_in, now)
        status = self._policy.decide(total_hours)

        if not self._attendance.update_punch_out(
            record_id=record.record_id,
            punch_out=now,
            status=status,
            total_hours=total_hours,
        ):
            raise NoOpenPunchError(f"Already punched out on {work_date.isoformat()}")

        logger.info("Punch-out %s on %s: %s hours, %s", employee_id, work_date, total_hours, status.value)
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def state_of(self, employee_id: str, work_date: date) -> PunchState:
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None:
            return PunchState.UNPUNCHED
        return record.state

    def history(self, employee_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        check_range(start, end)
        rows = self._attendance.list_for_range(start_date=start, end_date=end, employee_id=employee_id)
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def records_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        rows = self._attendance.list_for_range(start_date=work_date, end_date=work_date)
        return sorted(rows, key=lambda r: r.punch_in or datetime.min)
