from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance store.

    The store enforces at most one record per (employee_id, work_date):
    ``create_punch_in`` raises DuplicatePunchError when one already exists.
    """

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_punch_in(
        self,
        *,
        employee_id: str,
        work_date: date,
        punch_in: datetime,
        status: AttendanceStatus,
    ) -> int:
        raise NotImplementedError

    def update_punch_out(
        self,
        *,
        record_id: int,
        punch_out: datetime,
        status: AttendanceStatus,
        total_hours: Decimal,
    ) -> bool:
        """Close an open record. Returns False if it was already closed."""

        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_for_date(self, work_date: date, *, statuses: Sequence[AttendanceStatus]) -> int:
        raise NotImplementedError
