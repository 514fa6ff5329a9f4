from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Dict, List, Optional, Sequence, Set

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import covers, date_range, day_count, last_n_days, overlap_days
from ..core.constants import UNASSIGNED_DEPARTMENT, WEEK_DAYS
from ..core.enums import AttendanceStatus, DayStatus, LeaveStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..leaves.model import LeaveRequest
from ..leaves.repository import LeaveRepository
from .model import DailyBreakdown, DashboardSnapshot, EmployeeDay, PresenceSummary

logger = logging.getLogger(__name__)

_SHOWED_UP = (AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY, AttendanceStatus.PUNCHED_IN)

_DAY_STATUS = {
    AttendanceStatus.PRESENT: DayStatus.PRESENT,
    AttendanceStatus.HALF_DAY: DayStatus.HALF_DAY,
    AttendanceStatus.PUNCHED_IN: DayStatus.PUNCHED_IN,
    AttendanceStatus.ABSENT: DayStatus.ABSENT,
}


def implied_absent(total_employees: int, days_in_range: int, present_plus_leave_days: int) -> int:
    """Employee-days not accounted for by attendance or approved leave.

    A population-level residual, not a per-day census: an employee with both a
    record and an approved leave on the same date is counted twice in
    ``present_plus_leave_days``, and only the floor at 0 guards against it.
    """

    if total_employees < 0 or days_in_range < 0 or present_plus_leave_days < 0:
        raise ValidationError("Counts must be non-negative")
    return max(0, total_employees * days_in_range - present_plus_leave_days)


class AggregationEngine:
    """Read-only presence statistics over attendance records and approved leaves.

    Never writes; every method may run concurrently with any other.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        max_workers: int = 4,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._employees = employees
        self._max_workers = max_workers

    def _population(self, employee_id: Optional[str]) -> int:
        if employee_id is None:
            return self._employees.count()
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")
        return 1

    def aggregate(self, start: date, end: date, *, employee_id: Optional[str] = None) -> PresenceSummary:
        days = day_count(start, end)
        population = self._population(employee_id)

        records = self._attendance.list_for_range(start_date=start, end_date=end, employee_id=employee_id)
        present_only = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        half_day = sum(1 for r in records if r.status == AttendanceStatus.HALF_DAY)
        punched_in = sum(1 for r in records if r.status == AttendanceStatus.PUNCHED_IN)
        present_days = present_only + half_day

        approved = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=employee_id)
        leave_days = sum(overlap_days(l.interval, (start, end)) for l in approved)

        summary = PresenceSummary(
            start=start,
            end=end,
            population=population,
            days=days,
            present_days=present_days,
            present_only_days=present_only,
            half_day_days=half_day,
            punched_in_days=punched_in,
            leave_days=leave_days,
            implied_absent=implied_absent(population, days, present_days + leave_days),
        )
        logger.debug("Aggregated %s..%s: %s", start, end, summary)
        return summary

    @staticmethod
    def _records_by_day(records: Sequence[AttendanceRecord]) -> Dict[date, Dict[str, AttendanceRecord]]:
        by_day: Dict[date, Dict[str, AttendanceRecord]] = defaultdict(dict)
        for r in records:
            by_day[r.work_date][r.employee_id] = r
        return by_day

    @staticmethod
    def _on_leave(approved: Sequence[LeaveRequest], day: date, *, exclude: Set[str]) -> Set[str]:
        # Attendance wins over leave for the same (employee, date).
        return {l.employee_id for l in approved if covers(l.interval, day)} - exclude

    def daily_breakdown(self, start: date, end: date, *, employee_id: Optional[str] = None) -> List[DailyBreakdown]:
        population = self._population(employee_id)
        days = list(date_range(start, end))

        records = self._attendance.list_for_range(start_date=start, end_date=end, employee_id=employee_id)
        approved = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=employee_id)
        by_day = self._records_by_day(records)

        out: List[DailyBreakdown] = []
        for day in days:
            day_records = by_day.get(day, {})
            present = sum(1 for r in day_records.values() if r.status == AttendanceStatus.PRESENT)
            half_day = sum(1 for r in day_records.values() if r.status == AttendanceStatus.HALF_DAY)
            punched_in = sum(1 for r in day_records.values() if r.status == AttendanceStatus.PUNCHED_IN)
            leave = len(self._on_leave(approved, day, exclude=set(day_records)))
            out.append(
                DailyBreakdown(
                    day=day,
                    present=present,
                    half_day=half_day,
                    punched_in=punched_in,
                    leave=leave,
                    absent=implied_absent(population, 1, present + half_day + leave),
                )
            )
        return out

    def weekly_presence(self, today: date) -> List[DailyBreakdown]:
        start, end = last_n_days(today, WEEK_DAYS)
        return self.daily_breakdown(start, end)

    def employee_calendar(self, employee_id: str, start: date, end: date) -> List[EmployeeDay]:
        self._population(employee_id)
        days = list(date_range(start, end))

        records = {
            r.work_date: r
            for r in self._attendance.list_for_range(start_date=start, end_date=end, employee_id=employee_id)
        }
        approved = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=employee_id)

        out: List[EmployeeDay] = []
        for day in days:
            record = records.get(day)
            if record is not None:
                out.append(EmployeeDay(day=day, status=_DAY_STATUS[record.status]))
                continue
            covering = next((l for l in approved if covers(l.interval, day)), None)
            if covering is not None:
                out.append(EmployeeDay(day=day, status=DayStatus.LEAVE, leave_request_id=covering.request_id))
            else:
                out.append(EmployeeDay(day=day, status=DayStatus.ABSENT))
        return out

    def _on_leave_count(self, day: date) -> int:
        approved = self._leaves.list_approved_overlapping(start_date=day, end_date=day)
        return len({l.employee_id for l in approved})

    def dashboard_snapshot(self, today: date) -> DashboardSnapshot:
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            total = pool.submit(self._employees.count)
            present = pool.submit(self._attendance.count_for_date, today, statuses=_SHOWED_UP)
            on_leave = pool.submit(self._on_leave_count, today)
            pending = pool.submit(self._leaves.count_by_status, LeaveStatus.PENDING)

            return DashboardSnapshot(
                day=today,
                total_employees=total.result(),
                present_today=present.result(),
                on_leave_today=on_leave.result(),
                pending_leaves=pending.result(),
            )

    def department_headcount(self) -> List[dict]:
        counts: Dict[str, int] = defaultdict(int)
        for department, n in self._employees.department_counts().items():
            counts[(department or "").strip() or UNASSIGNED_DEPARTMENT] += int(n)
        return [{"department": d, "count": n} for d, n in sorted(counts.items())]
